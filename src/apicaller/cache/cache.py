"""In-memory (or disk-backed) response cache partitioned by endpoint.

One partition exists for every :class:`~apicaller.models.Endpoint`; the
partitions are created when :class:`ResponseCache` is constructed and the
endpoint -> partition mapping is never changed afterwards. Within a
partition, entries are keyed by the request's rendered URL string and
hold the raw response bytes, so two requests that render to the same URL
under the same endpoint share one entry (later write wins).

There is no invalidation or expiry API. Entries only leave a
partition through the storage backend's own eviction, which callers see
as an ordinary cache miss.

See Also:
    :class:`~apicaller.models.CacheConfig` -- selects the backend and its
    bounds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from apicaller.cache.partitions import DiskPartition, MemoryPartition, Partition
from apicaller.models import CacheConfig, Endpoint


class ResponseCache:
    """Raw response bytes, partitioned by endpoint and keyed by URL.

    Args:
        config: Backend selection and bounds. Defaults to an unbounded
            memory cache.
        cache_dir: Root directory for the ``disk`` backend. Each endpoint
            gets ``<cache_dir>/responses/<endpoint>``. Required when
            ``config.backend == "disk"``.

    Example::

        from apicaller.cache import ResponseCache
        from apicaller.models import Endpoint

        cache = ResponseCache()
        cache.set(Endpoint.ONE, "https://exampleURL.com/api/one", b'{"id": 1}')
        hit = cache.get(Endpoint.ONE, "https://exampleURL.com/api/one")
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        cache_dir: str | Path | None = None,
    ) -> None:
        self._config = config or CacheConfig()
        self._cache_dir = Path(cache_dir) if cache_dir is not None else None
        if self._config.backend == "disk" and self._cache_dir is None:
            raise ValueError("cache_dir is required for the disk cache backend")
        self._partitions: dict[Endpoint, Partition] = {
            endpoint: self._make_partition(endpoint) for endpoint in Endpoint
        }

    def get(self, endpoint: Endpoint, url: Optional[str]) -> Optional[bytes]:
        """Look up cached bytes.

        Args:
            endpoint: Partition to look in.
            url: Rendered request URL, or ``None`` for an unformable URL.

        Returns:
            The cached bytes, or ``None`` when *endpoint* has no partition,
            *url* is ``None``, or nothing is stored under *url*.
        """
        partition = self._partitions.get(endpoint)
        if partition is None or url is None:
            return None
        return partition.get(url)

    def set(self, endpoint: Endpoint, url: Optional[str], data: bytes) -> None:
        """Store *data* under *url* in *endpoint*'s partition, overwriting any entry.

        Silently does nothing when *endpoint* has no partition or *url* is
        ``None``.
        """
        partition = self._partitions.get(endpoint)
        if partition is None or url is None:
            return
        partition.set(url, data)

    def partition(self, endpoint: Endpoint) -> Optional[Partition]:
        """Return the partition for *endpoint*, if one exists."""
        return self._partitions.get(endpoint)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``backend`` and per-endpoint entry counts under
            ``partitions``; the disk backend also reports ``directory``.
        """
        result: dict[str, Any] = {
            "backend": self._config.backend,
            "partitions": {
                endpoint.value: len(partition)
                for endpoint, partition in self._partitions.items()
            },
        }
        if self._cache_dir is not None and self._config.backend == "disk":
            result["directory"] = str(self._cache_dir / "responses")
        return result

    def close(self) -> None:
        """Release backend resources. Safe to call more than once."""
        for partition in self._partitions.values():
            partition.close()

    def _make_partition(self, endpoint: Endpoint) -> Partition:
        if self._config.backend == "disk":
            assert self._cache_dir is not None
            return DiskPartition(
                self._cache_dir / "responses" / endpoint.value,
                size_limit=self._config.size_limit,
            )
        return MemoryPartition(max_entries=self._config.max_entries)
