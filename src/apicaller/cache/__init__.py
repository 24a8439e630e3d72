"""Per-endpoint response caching for apicaller.

This package provides :class:`ResponseCache`, which keeps the raw bytes of
successful responses in one partition per
:class:`~apicaller.models.Endpoint`, keyed by the rendered request URL.
Partitions are created eagerly when the cache is constructed.

The cache is consumed by :class:`~apicaller.client.Dispatcher` and is
controlled by the ``cache`` section of the global configuration
(:class:`~apicaller.models.CacheConfig`).
"""

from apicaller.cache.cache import ResponseCache
from apicaller.cache.partitions import DiskPartition, MemoryPartition, Partition

__all__ = ["DiskPartition", "MemoryPartition", "Partition", "ResponseCache"]
