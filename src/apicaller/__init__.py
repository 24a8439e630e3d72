"""apicaller -- a typed, cache-first API caller for a fixed set of endpoints.

Requests are built against a closed registry of endpoints, rendered into
``base/endpoint[/segment]*[?name=value(&name=value)*]`` URLs, and dispatched
through a cache-first client: cached raw bytes are decoded when present,
otherwise a single GET is issued and its body cached per endpoint.

Typical use::

    from apicaller import Dispatcher, Endpoint, build

    async with Dispatcher() as dispatcher:
        result = await dispatcher.execute(build(Endpoint.ONE, ["42"]), dict)

Modules:
    models: Endpoint registry and Pydantic configuration models.
    request: Request builder and reverse URL parser.
    cache: Per-endpoint response cache.
    client: Cache-first asynchronous dispatcher.
    config: XDG-aware configuration loading with precedence resolution.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from apicaller.cache import ResponseCache  # noqa: E402
from apicaller.client import Dispatcher, Result  # noqa: E402
from apicaller.models import Endpoint  # noqa: E402
from apicaller.request import APIRequest, QueryItem, build, parse  # noqa: E402

__all__ = [
    "APIRequest",
    "Dispatcher",
    "Endpoint",
    "QueryItem",
    "ResponseCache",
    "Result",
    "build",
    "parse",
]
