"""Sharded hash map holding the cache's items."""

from __future__ import annotations

import threading
from typing import Any

NUM_SHARDS = 256


class Item:
    """A cache entry; holding its lock serialises changes to it."""

    def __init__(self, key: int) -> None:
        self.key = key
        self.value: Any = None
        self.dead = False
        self.lock = threading.Lock()

    def __enter__(self) -> "Item":
        self.lock.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.lock.release()

    def delete(self, store: "Store") -> bool:
        """Mark the item dead and remove it from ``store``.

        Returns False if it was already dead.
        """
        if self.dead:
            return False
        self.dead = True
        store.delete(self.key)
        return True


class _Shard:
    __slots__ = ("lock", "data")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.data: dict[int, Item] = {}


class Store:
    """Concurrent map from hashed keys to items, split into shards."""

    def __init__(self) -> None:
        self._shards = [_Shard() for _ in range(NUM_SHARDS)]

    def _shard(self, key: int) -> _Shard:
        return self._shards[key % NUM_SHARDS]

    def get_value(self, key: int) -> tuple[Any, bool]:
        """Return the item's value and whether the key is present."""
        item = self.get(key)
        if item is None:
            return None, False
        return item.value, True

    def get(self, key: int) -> Item | None:
        """Return the item for ``key``, or None."""
        shard = self._shard(key)
        with shard.lock:
            return shard.data.get(key)

    def get_or_new(self, key: int) -> Item:
        """Return the item for ``key``, creating an empty one if missing."""
        shard = self._shard(key)
        with shard.lock:
            item = shard.data.get(key)
            if item is None:
                item = shard.data[key] = Item(key)
            return item

    def delete(self, key: int) -> Item | None:
        """Remove ``key`` and return its item, or None if it was absent."""
        shard = self._shard(key)
        with shard.lock:
            return shard.data.pop(key, None)

    def clear(self) -> None:
        """Remove every item."""
        for shard in self._shards:
            with shard.lock:
                shard.data = {}