"""Cache-first asynchronous dispatch for apicaller.

Classes:
    :class:`Dispatcher` -- checks the :class:`~apicaller.cache.ResponseCache`,
    falls back to a single GET via :class:`httpx.AsyncClient`, decodes the
    body and caches it.
    :class:`Result` -- success-or-failure value returned by
    :meth:`Dispatcher.execute`.

Example::

    from apicaller.client import Dispatcher
    from apicaller.request import build

    async with Dispatcher() as dispatcher:
        user = await dispatcher.fetch(build("one", ["users", "42"]), dict)
"""

from apicaller.client.dispatcher import Dispatcher
from apicaller.client.result import Result

__all__ = ["Dispatcher", "Result"]
