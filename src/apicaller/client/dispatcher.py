"""Cache-first asynchronous dispatcher.

This module provides :class:`Dispatcher`, which runs the full dispatch flow
for one :class:`~apicaller.request.APIRequest`:

1. **Cache lookup** -- the endpoint's partition of the
   :class:`~apicaller.cache.ResponseCache` is checked for the rendered URL.
   A hit is decoded and returned. A hit that fails to decode is reported
   as a :class:`~apicaller.exceptions.DecodeError`; it is *not* treated as
   a miss.
2. **Request creation** -- an unformable URL fails with
   :class:`~apicaller.exceptions.RequestCreationError` before any I/O.
3. **Network call** -- exactly one GET through :class:`httpx.AsyncClient`.
   Transport errors and empty bodies surface as
   :class:`~apicaller.exceptions.NetworkError`. The status code is not
   inspected: any non-empty body goes on to decoding.
4. **Decode and store** -- the body is validated into the caller's type
   with a Pydantic :class:`~pydantic.TypeAdapter` in strict mode (no
   coercion such as ``"1"`` to ``1``); only a body that decodes is written
   to the cache.

There are no retries and no de-duplication: two concurrent dispatches of
the same uncached URL both hit the network and both write the cache.

Three entry points share that flow. :meth:`Dispatcher.fetch` raises,
:meth:`Dispatcher.execute` returns a :class:`~apicaller.client.Result`, and
:meth:`Dispatcher.submit` schedules the dispatch as a task and hands the
result to a completion callback.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Optional, TypeVar

import httpx
from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError

from apicaller.cache import ResponseCache
from apicaller.client.result import Result
from apicaller.exceptions import (
    ApicallerError,
    DecodeError,
    InvalidUsageError,
    NetworkError,
    RequestCreationError,
)
from apicaller.models import RequestConfig
from apicaller.output import debug
from apicaller.request import APIRequest

T = TypeVar("T")


class Dispatcher:
    """Dispatches requests through a per-endpoint response cache.

    Each dispatcher owns its cache state; there is no process-wide
    instance. Must be used as an async context manager so that the
    underlying :class:`httpx.AsyncClient` is opened and closed.

    Args:
        config: Transport settings (timeout, SSL verification).
        cache: Cache to read and populate. A fresh in-memory
            :class:`~apicaller.cache.ResponseCache` is created when
            omitted.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with Dispatcher() as dispatcher:
            result = await dispatcher.execute(build(Endpoint.TWO), list[dict])
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._cache = cache if cache is not None else ResponseCache()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> Dispatcher:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public dispatch methods
    # ------------------------------------------------------------------ #

    async def fetch(self, request: APIRequest, expecting: Optional[type[T]] = None) -> T:
        """Dispatch *request* and return the decoded body.

        Args:
            request: The request to dispatch.
            expecting: Type the JSON body is validated into. ``None``
                returns the plain decoded JSON.

        Returns:
            The decoded value, from the cache or from the network.

        Raises:
            DecodeError: The cached or fetched body does not match
                *expecting*.
            RequestCreationError: The request URL cannot be formed.
            NetworkError: Transport failure or empty body.
        """
        url = request.url
        cached = self._cache.get(request.endpoint, url)
        if cached is not None:
            debug(f"Cache hit: {request.endpoint.value} {url}")
            return _decode(cached, expecting)

        if url is None:
            raise RequestCreationError(
                f"Cannot create a request from '{request.url_string}'"
            )

        debug(f"Cache miss: {request.endpoint.value} {url}")
        body = await self._send(request.http_method, url)
        value = _decode(body, expecting)

        self._cache.set(request.endpoint, url, body)
        debug(f"Cached {len(body)} bytes: {request.endpoint.value} {url}")
        return value

    async def execute(
        self, request: APIRequest, expecting: Optional[type[T]] = None
    ) -> Result[T]:
        """Dispatch *request*, reporting every failure through the returned :class:`Result`."""
        try:
            value = await self.fetch(request, expecting)
        except ApicallerError as exc:
            debug(f"Dispatch failed: {request} ({type(exc).__name__}: {exc})")
            return Result.failure(exc)
        return Result.success(value)

    def submit(
        self,
        request: APIRequest,
        expecting: Optional[type[T]],
        completion: Callable[[Result[T]], Any],
    ) -> asyncio.Task[Result[T]]:
        """Schedule *request* and call *completion* with its result.

        *completion* runs exactly once, on the event loop, and never before
        ``submit`` has returned. Must be called with a running event loop.

        Returns:
            The scheduled task; awaiting it yields the same :class:`Result`.
        """

        async def _run() -> Result[T]:
            result = await self.execute(request, expecting)
            completion(result)
            return result

        return asyncio.get_running_loop().create_task(_run())

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(self, method: str, url: str) -> bytes:
        """Issue one request and return its non-empty body."""
        if self._client is None:
            raise InvalidUsageError("Dispatcher is not open; use it as an async context manager")

        try:
            http_request = self._client.build_request(method, url)
        except httpx.InvalidURL as exc:
            raise RequestCreationError(f"Cannot create a request from '{url}': {exc}") from exc

        try:
            response = await self._client.send(http_request)
        except httpx.HTTPError as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        if not response.content:
            raise NetworkError(f"No data received from {method} {url}")
        return response.content


def _decode(data: bytes, expecting: Optional[type[T]]) -> T:
    """Strictly validate JSON *data* into *expecting* (plain JSON when ``None``)."""
    target: Any = Any if expecting is None else expecting
    name = getattr(target, "__name__", None) or repr(target)
    try:
        adapter = TypeAdapter(target)
    except (PydanticSchemaGenerationError, TypeError) as exc:
        raise DecodeError(f"Cannot decode a response into {name}: {exc}") from exc
    try:
        return adapter.validate_json(data, strict=True)
    except ValidationError as exc:
        raise DecodeError(
            f"Response did not match {name}: {exc.error_count()} validation error(s)"
        ) from exc
