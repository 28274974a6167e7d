"""Lossy striped buffers that batch key accesses before handing them on."""

from __future__ import annotations

from collections import deque
from typing import Protocol


class RingConsumer(Protocol):
    """Receives batches of keys; returns whether the batch was accepted."""

    def push(self, items: list[int]) -> bool: ...


class RingStripe:
    """A single batch buffer that drains to its consumer when full."""

    def __init__(self, consumer: RingConsumer, capacity: int) -> None:
        self.consumer = consumer
        self.capacity = capacity
        self._data: list[int] = []

    def push(self, item: int) -> None:
        """Append ``item``; when full, hand the batch on or drop it."""
        self._data.append(item)
        if len(self._data) >= self.capacity:
            if self.consumer.push(self._data):
                self._data = []
            else:
                self._data.clear()


class RingBuffer:
    """A pool of stripes shared between callers to keep contention low."""

    def __init__(self, consumer: RingConsumer, capacity: int) -> None:
        self._consumer = consumer
        self._capacity = capacity
        self._stripes: deque[RingStripe] = deque()

    def push(self, item: int) -> None:
        """Add ``item`` to a free stripe, draining it if it becomes full."""
        try:
            stripe = self._stripes.pop()
        except IndexError:
            stripe = RingStripe(self._consumer, self._capacity)
        stripe.push(item)
        self._stripes.append(stripe)