"""A pool of reusable byte buffers grouped by page-aligned size."""

from __future__ import annotations

import threading
from collections import deque

PAGE_SIZE = 1024


def _backing(buf) -> bytearray | None:
    if isinstance(buf, memoryview):
        buf = buf.obj
    return buf if isinstance(buf, bytearray) else None


def _capacity(buf) -> int:
    base = _backing(buf)
    return len(base) if base is not None else len(buf)


class Pool:
    """Reusable byte buffers of one fixed size."""

    def __init__(self, size: int) -> None:
        self.size = size
        self._free: deque[bytearray] = deque()

    def get_buffer(self, size: int) -> memoryview:
        """Return a view of ``size`` bytes over a pooled buffer."""
        if size > self.size:
            raise ValueError(f"requested {size} bytes from a pool of {self.size}")
        try:
            buf = self._free.pop()
        except IndexError:
            buf = bytearray(self.size)
        return memoryview(buf)[:size]

    def put_buffer(self, buf) -> None:
        """Return a buffer to the pool if it is large enough."""
        base = _backing(buf)
        if base is not None and len(base) >= self.size:
            self._free.append(base)


class Buffers:
    """Pools of byte buffers keyed by size rounded up to the page size."""

    def __init__(self, page_size: int) -> None:
        self.page_size = max(page_size, 1)
        self._pools: dict[int, Pool] = {}
        self._lock = threading.Lock()

    def assign_pool(self, size: int) -> Pool:
        """Return the pool serving buffers of ``size`` bytes."""
        aligned = size
        if size % self.page_size:
            aligned = size // self.page_size * self.page_size + self.page_size
        pool = self._pools.get(aligned)
        if pool is not None:
            return pool
        with self._lock:
            return self._pools.setdefault(aligned, Pool(aligned))

    def get_buffer(self, size: int) -> memoryview:
        """Return a buffer of ``size`` bytes from the matching pool."""
        return self.assign_pool(size).get_buffer(size)

    def put_buffer(self, buf) -> None:
        """Give a buffer back to the pool matching its capacity."""
        self.assign_pool(_capacity(buf)).put_buffer(buf)


_default_buffers = Buffers(PAGE_SIZE)


def assign_pool(size: int) -> Pool:
    """Return the default pool serving buffers of ``size`` bytes."""
    return _default_buffers.assign_pool(size)


def get_buffer(size: int) -> memoryview:
    """Return a buffer of ``size`` bytes from the default pools."""
    return _default_buffers.get_buffer(size)


def put_buffer(buf) -> None:
    """Give a buffer back to the default pools."""
    _default_buffers.put_buffer(buf)