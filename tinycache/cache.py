"""A fixed-size in-memory cache with TinyLFU admission and sampled-LFU eviction."""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Any, Callable

from .metrics import Metrics, MetricType
from .policy import Policy
from .ring import RingBuffer
from .store import Item, Store

SET_BUFFER_SIZE = 32 * 1024
"""Number of pending set and delete events the cache buffers."""

_STOP = object()


@dataclass
class Config:
    """Settings for a :class:`Cache`.

    ``num_counters`` is the number of keys whose access frequency is
    tracked, ``max_cost`` the capacity in whatever unit costs are given,
    and ``buffer_items`` the size of the batches of accessed keys handed
    to the policy. ``on_evict`` is called with the key and value of every
    evicted item; ``cost`` computes a value's cost when a set gives 0.
    """

    num_counters: int = 0
    max_cost: int = 0
    buffer_items: int = 0
    metrics: bool = False
    on_evict: Callable[[int, Any], None] | None = None
    cost: Callable[[Any], int] | None = None


@dataclass(frozen=True)
class _SetEvent:
    key: int
    cost: int = 0
    delete: bool = False


class Cache:
    """Thread-safe cache keyed by 64-bit integers.

    Values are stored at once; admission and eviction decisions are made
    by a background thread that replays set and delete events in order.
    """

    def __init__(self, config: Config) -> None:
        if config.num_counters <= 0:
            raise ValueError("num_counters can't be zero")
        if config.max_cost <= 0:
            raise ValueError("max_cost can't be zero")
        if config.buffer_items <= 0:
            raise ValueError("buffer_items can't be zero")
        self.policy = Policy(config.num_counters, config.max_cost)
        self.store = Store()
        self.metrics: Metrics | None = None
        self._get_buf = RingBuffer(self.policy, config.buffer_items)
        self._set_events: queue.Queue = queue.Queue(maxsize=SET_BUFFER_SIZE)
        self._on_evict = config.on_evict
        self._cost = config.cost
        self._closed = False
        if config.metrics:
            self.metrics = Metrics()
            self.policy.collect_metrics(self.metrics)
        self._worker = self._start_worker()

    def __enter__(self) -> "Cache":
        return self

    def __exit__(self, *exc_info) -> None:
        if not self._closed:
            self.close()

    def _start_worker(self) -> threading.Thread:
        worker = threading.Thread(target=self._process_items, daemon=True)
        worker.start()
        return worker

    def _stop_worker(self) -> None:
        self._set_events.put(_STOP)
        self._worker.join()

    def _record(self, kind: MetricType, key: int, delta: int) -> None:
        if self.metrics is not None:
            self.metrics.add(kind, key, delta)

    def _send(self, event: _SetEvent) -> None:
        if not self._closed:
            self._set_events.put(event)

    def get(self, key: int) -> tuple[Any, bool]:
        """Return the value for ``key`` and whether it was found."""
        self._get_buf.push(key)
        value, found = self.store.get_value(key)
        self._record(MetricType.HIT if found else MetricType.MISS, key, 1)
        return value, found

    def set(self, key: int, value: Any, cost: int = 0) -> None:
        """Store ``value`` under ``key``; the policy may later drop it.

        A cost of 0 is replaced by the configured cost function's result.
        """
        if cost == 0 and self._cost is not None:
            cost = self._cost(value)
        while True:
            item = self.store.get_or_new(key)
            with item:
                if item.dead:
                    continue
                item.value = value
                # Sent under the item lock so events keep the order of the mutations.
                self._send(_SetEvent(key, cost))
                return

    def set_new_max_cost(self, new_max_cost: int) -> None:
        """Change the total cost the cache may hold."""
        self.policy.set_new_max_cost(new_max_cost)

    def get_or_compute(self, key: int, factory: Callable[[], tuple[Any, int]]) -> Any:
        """Return the value for ``key``, computing it with ``factory`` if missing.

        ``factory`` returns a (value, cost) pair. Concurrent callers for the
        same key run it once; an exception from it propagates.
        """
        while True:
            item = self.store.get_or_new(key)
            if item.value is not None:
                return item.value
            done, value = self._compute(item, factory)
            if done:
                return value

    def _compute(self, item: Item, factory) -> tuple[bool, Any]:
        with item:
            if item.dead:
                return False, None
            if item.value is not None:
                return True, item.value
            value, cost = factory()
            item.value = value
            if cost == 0 and self._cost is not None:
                cost = self._cost(value)
            self._send(_SetEvent(item.key, cost))
            return True, value

    def delete(self, key: int) -> Any:
        """Remove ``key`` and return its value, or None if it was absent."""
        item = self.store.get(key)
        if item is None:
            return None
        with item:
            if item.delete(self.store):
                self._send(_SetEvent(key, delete=True))
            return item.value

    def close(self) -> None:
        """Stop the background threads."""
        if self._closed:
            raise RuntimeError("cache is closed")
        self._stop_worker()
        self._closed = True
        self.policy.close()

    def clear(self) -> None:
        """Drop every item and zero the policy counters and metrics.

        No get or set may run concurrently with this call.
        """
        if self._closed:
            raise RuntimeError("cache is closed")
        self._stop_worker()
        while True:
            try:
                self._set_events.get_nowait()
            except queue.Empty:
                break
        self.policy.clear()
        self.store.clear()
        if self.metrics is not None:
            self.metrics.clear()
        self._worker = self._start_worker()

    def _process_items(self) -> None:
        while True:
            event = self._set_events.get()
            if event is _STOP:
                return
            if event.delete:
                self.policy.delete(event.key)
            else:
                self._handle_new_item(event.key, event.cost)

    def _evict(self, item: Item) -> None:
        with item:
            deleted = item.delete(self.store)
        if deleted and self._on_evict is not None:
            self._on_evict(item.key, item.value)

    def _handle_new_item(self, key: int, cost: int) -> None:
        in_map = self.store.get(key)
        if in_map is None:
            # Already removed; admitting it would leave a dangling policy entry.
            return
        victims, added = self.policy.add(key, cost)
        if not added:
            current = self.store.get(key)
            if current is None or current is not in_map:
                return
            self._evict(current)
            return
        for victim_key in victims or ():
            victim = self.store.get(victim_key)
            if victim is not None:
                self._evict(victim)