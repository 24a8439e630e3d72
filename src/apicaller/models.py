"""Canonical Pydantic models shared across all apicaller modules.

The models fall into two groups:

**Registry** -- :class:`Endpoint`, the closed set of API endpoints. Each
member is used both as a URL path segment and as a cache-partition key.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`RequestConfig`, :class:`CacheConfig`,
:class:`OutputConfig` and :class:`GlobalConfig`.
"""

from __future__ import annotations

import enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://exampleURL.com/api"


# --- Endpoint registry ---


class Endpoint(str, enum.Enum):
    """Registered API endpoints.

    The set is fixed at import time. ``Endpoint.ONE.value`` is the path
    segment rendered after the base URL (``<base>/one``), and each member
    owns exactly one partition of the
    :class:`~apicaller.cache.ResponseCache`.
    """

    ONE = "one"
    TWO = "two"
    THREE = "three"

    @classmethod
    def parse(cls, token: str) -> Optional[Endpoint]:
        """Return the member whose value is *token*, or ``None``."""
        try:
            return cls(token)
        except ValueError:
            return None


# --- Config ---


class RequestConfig(BaseModel):
    """Transport settings applied to every dispatched request."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`GlobalConfig`.

    ``memory`` keeps entries for the lifetime of the process. ``disk``
    stores each endpoint partition in its own :mod:`diskcache` directory
    under the cache dir, so entries survive between CLI invocations.
    """

    backend: Literal["memory", "disk"] = Field(
        default="memory", description="Storage backend: memory or disk"
    )
    max_entries: Optional[int] = Field(
        default=None,
        ge=1,
        description="Per-partition entry bound for the memory backend (None = unbounded)",
    )
    size_limit: int = Field(
        default=64 * 1024 * 1024,
        ge=1,
        description="Per-partition size bound in bytes for the disk backend",
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/apicaller/config.json``.

    Loaded and saved by :func:`~apicaller.config.load_global_config` and
    :func:`~apicaller.config.save_global_config`. See
    :func:`~apicaller.config.resolve_config` for the precedence chain.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base URL every endpoint is rendered under"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
