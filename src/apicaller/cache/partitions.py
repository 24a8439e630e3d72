"""Storage backends for a single endpoint's cache partition.

A partition is a best-effort ``str -> bytes`` map. Neither backend adds
locking: every operation is a single key read or write, and concurrent
writers to one key simply leave the last value in place. Entries may
disappear through the backend's own eviction; callers treat that as a miss.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol

import diskcache


class Partition(Protocol):
    """Minimal interface shared by the partition backends."""

    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, data: bytes) -> None: ...

    def __len__(self) -> int: ...

    def close(self) -> None: ...


class MemoryPartition:
    """Process-local partition backed by a ``dict``.

    Args:
        max_entries: When set, storing a new key into a full partition
            evicts the oldest stored entry. ``None`` leaves it unbounded.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self._max_entries = max_entries
        self._entries: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._entries.get(key)

    def set(self, key: str, data: bytes) -> None:
        if (
            self._max_entries is not None
            and key not in self._entries
            and len(self._entries) >= self._max_entries
        ):
            oldest = next(iter(self._entries), None)
            if oldest is not None:
                self._entries.pop(oldest, None)
        self._entries[key] = data

    def __len__(self) -> int:
        return len(self._entries)

    def close(self) -> None:
        self._entries.clear()


class DiskPartition:
    """Partition persisted with :mod:`diskcache`.

    Uses the ``least-recently-stored`` eviction policy so that the partition
    never grows past *size_limit* bytes.

    Args:
        directory: Directory holding this partition's database.
        size_limit: Approximate upper bound on stored bytes.
    """

    def __init__(self, directory: str | Path, size_limit: int) -> None:
        self._cache: Optional[diskcache.Cache] = diskcache.Cache(
            str(directory),
            size_limit=size_limit,
            eviction_policy="least-recently-stored",
        )

    def get(self, key: str) -> Optional[bytes]:
        if self._cache is None:
            return None
        value = self._cache.get(key)
        return value if isinstance(value, bytes) else None

    def set(self, key: str, data: bytes) -> None:
        if self._cache is None:
            return
        self._cache.set(key, data)

    def __len__(self) -> int:
        if self._cache is None:
            return 0
        return len(self._cache)

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()
            self._cache = None
