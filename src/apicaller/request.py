"""Request construction and reverse URL parsing.

An :class:`APIRequest` is an immutable description of one GET call: an
:class:`~apicaller.models.Endpoint`, ordered path components and ordered
query parameters, rendered under a base URL as::

    <base>/<endpoint>[/<component>]*[?<name>=<value>(&<name>=<value>)*]

Query parameters whose value is ``None`` are silently dropped from the
rendered URL. The rendered string doubles as the cache key inside the
endpoint's partition of :class:`~apicaller.cache.ResponseCache`.

:func:`parse` goes the other way and recognises exactly two shapes,
path-style (``<base>/one/a/b``) and query-style (``<base>/one?k=v&k=v``).
Anything it cannot recognise yields ``None`` rather than an exception.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import ClassVar, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from apicaller.exceptions import InvalidUsageError
from apicaller.models import DEFAULT_BASE_URL, Endpoint

_UNSAFE_SEGMENT = re.compile(r"[\s/?#]")
_UNSAFE_QUERY_NAME = re.compile(r"[\s&=#?]")
_UNSAFE_QUERY_VALUE = re.compile(r"[\s&#]")


class QueryItem(BaseModel):
    """A single ``name=value`` query parameter. ``value=None`` is never rendered."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Optional[str] = None

    def render(self) -> Optional[str]:
        if self.value is None:
            return None
        return f"{self.name}={self.value}"


QueryInput = Union[QueryItem, tuple[str, Optional[str]]]


class APIRequest(BaseModel):
    """An immutable GET request against one registered endpoint.

    Instances are usually created with :func:`build` or :func:`parse`.

    Example::

        request = build(Endpoint.ONE, ["users", "42"], [("expand", "true")])
        request.url_string
        # 'https://exampleURL.com/api/one/users/42?expand=true'
    """

    model_config = ConfigDict(frozen=True)

    http_method: ClassVar[str] = "GET"

    endpoint: Endpoint
    path_components: tuple[str, ...] = ()
    query_parameters: tuple[QueryItem, ...] = ()
    base_url: str = DEFAULT_BASE_URL

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def url_string(self) -> str:
        """The rendered URL, whether or not it is well formed."""
        parts = [self.base_url, "/", self.endpoint.value]
        for component in self.path_components:
            parts.append(f"/{component}")

        rendered = [r for r in (item.render() for item in self.query_parameters) if r]
        if rendered:
            parts.append("?")
            parts.append("&".join(rendered))
        return "".join(parts)

    @property
    def url(self) -> Optional[str]:
        """The rendered URL, or ``None`` when it cannot be formed.

        A URL cannot be formed when the base URL has no ``http``/``https``
        scheme or host, when a path component is empty or contains a
        separator (``/``, ``?``, ``#``) or whitespace, or when a query name
        or value would break the ``name=value&...`` layout.
        """
        if not _is_valid_base(self.base_url):
            return None
        for component in self.path_components:
            if not component or _UNSAFE_SEGMENT.search(component):
                return None
        for item in self.query_parameters:
            if not item.name or _UNSAFE_QUERY_NAME.search(item.name):
                return None
            if item.value is not None and _UNSAFE_QUERY_VALUE.search(item.value):
                return None
        return self.url_string

    def __str__(self) -> str:
        return f"{self.http_method} {self.url_string}"


# --- Construction ---


def build(
    endpoint: Endpoint | str,
    path_components: Iterable[str] = (),
    query_parameters: Iterable[QueryInput] | Mapping[str, Optional[str]] = (),
    base_url: str = DEFAULT_BASE_URL,
) -> APIRequest:
    """Build a request for *endpoint*.

    Args:
        endpoint: A registered :class:`Endpoint` or its string value.
        path_components: Segments appended in order, each after a ``/``.
        query_parameters: :class:`QueryItem` objects, ``(name, value)``
            pairs, or a mapping of names to values. Order is preserved.
        base_url: URL every endpoint is rendered under.

    Returns:
        The immutable :class:`APIRequest`.

    Raises:
        InvalidUsageError: If *endpoint* is not a registered endpoint, or a
            path component, query name or query value is not a string.
    """
    resolved = endpoint if isinstance(endpoint, Endpoint) else Endpoint.parse(endpoint)
    if resolved is None:
        known = ", ".join(e.value for e in Endpoint)
        raise InvalidUsageError(f"Unknown endpoint '{endpoint}' (expected one of: {known})")

    if isinstance(query_parameters, Mapping):
        query_parameters = list(query_parameters.items())

    try:
        items = tuple(
            item if isinstance(item, QueryItem) else QueryItem(name=item[0], value=item[1])
            for item in query_parameters
        )
        return APIRequest(
            endpoint=resolved,
            path_components=tuple(path_components),
            query_parameters=items,
            base_url=base_url,
        )
    except ValidationError as exc:
        raise InvalidUsageError(
            f"Invalid request for '{resolved.value}': {exc.error_count()} validation error(s)"
        ) from exc


def parse(url_string: str, base_url: str = DEFAULT_BASE_URL) -> Optional[APIRequest]:
    """Reverse-parse a rendered URL into an :class:`APIRequest`.

    Recognised shapes:

    * ``<base>/<endpoint>`` -- no components.
    * ``<base>/<endpoint>/<seg>/<seg>`` -- path-style.
    * ``<base>/<endpoint>?k=v&k=v`` -- query-style. Pairs without ``=``
      are dropped; a value is everything after the first ``=``.

    Args:
        url_string: The URL to parse.
        base_url: The base URL *url_string* must start with.

    Returns:
        The parsed request, or ``None`` if the string does not start with
        *base_url*, names an unknown endpoint, contains an empty path
        segment, or mixes path segments with a query string.
    """
    prefix = base_url.rstrip("/") + "/"
    if not url_string.startswith(prefix):
        return None

    head, has_query, query = url_string[len(prefix):].partition("?")
    segments = head.split("/")
    endpoint = Endpoint.parse(segments[0])
    if endpoint is None:
        return None

    path_components = segments[1:]
    if has_query and path_components:
        return None
    if any(not segment for segment in path_components):
        return None

    items: list[QueryItem] = []
    if has_query:
        for pair in query.split("&"):
            name, has_value, value = pair.partition("=")
            if not has_value or not name:
                continue
            items.append(QueryItem(name=name, value=value))

    return APIRequest(
        endpoint=endpoint,
        path_components=tuple(path_components),
        query_parameters=tuple(items),
        base_url=base_url,
    )


def _is_valid_base(base_url: str) -> bool:
    """Return True if *base_url* is an absolute http(s) URL with a host."""
    try:
        parsed = httpx.URL(base_url)
    except httpx.InvalidURL:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.host)


# --- Convenience requests ---

FIRST_REQUEST = build(Endpoint.ONE)
SECOND_REQUEST = build(Endpoint.TWO)
THIRD_REQUEST = build(Endpoint.THREE)
