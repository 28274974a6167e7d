"""Admission and eviction policy: TinyLFU admission with sampled-LFU eviction."""

from __future__ import annotations

import queue
import sys
import threading
from dataclasses import dataclass

from .bloom import Bloom
from .metrics import Metrics, MetricType
from .sketch import CMSketch

LFU_SAMPLE = 5
"""Number of items sampled when looking for an eviction candidate."""

_ITEMS_QUEUE_SIZE = 3
_STOP = object()


def _record(metrics: Metrics | None, kind: MetricType, key: int, delta: int) -> None:
    if metrics is not None:
        metrics.add(kind, key, delta)


@dataclass
class PolicyPair:
    """A key and its cost, as sampled for eviction."""

    key: int
    cost: int


class SampledLFU:
    """Eviction helper tracking the cost of every admitted key."""

    def __init__(self, max_cost: int) -> None:
        self.key_costs: dict[int, int] = {}
        self.max_cost = max_cost
        self.used = 0
        self.metrics: Metrics | None = None

    def room_left(self, cost: int) -> int:
        """Room that would remain after adding an item of ``cost``."""
        return self.max_cost - (self.used + cost)

    def fill_sample(self, sample: list[PolicyPair]) -> list[PolicyPair]:
        """Top ``sample`` up to ``LFU_SAMPLE`` pairs taken from the tracked keys."""
        if len(sample) >= LFU_SAMPLE:
            return sample
        for key, cost in self.key_costs.items():
            sample.append(PolicyPair(key, cost))
            if len(sample) >= LFU_SAMPLE:
                break
        return sample

    def delete(self, key: int) -> None:
        """Stop tracking ``key`` and release its cost."""
        cost = self.key_costs.pop(key, None)
        if cost is None:
            return
        self.used -= cost
        _record(self.metrics, MetricType.COST_EVICT, key, cost)
        _record(self.metrics, MetricType.KEY_EVICT, key, 1)

    def add(self, key: int, cost: int) -> None:
        """Track ``key`` with ``cost``."""
        self.key_costs[key] = cost
        self.used += cost

    def update_if_has(self, key: int, cost: int) -> bool:
        """Update the cost of a tracked key; return False if it is not tracked."""
        prev = self.key_costs.get(key)
        if prev is None:
            return False
        _record(self.metrics, MetricType.KEY_UPDATE, key, 1)
        if prev != cost:
            _record(self.metrics, MetricType.COST_ADD, key, cost - prev)
        self.used += cost - prev
        self.key_costs[key] = cost
        return True

    def clear(self) -> None:
        """Forget every key."""
        self.used = 0
        self.key_costs = {}


class TinyLFU:
    """Admission helper estimating access frequency with 4-bit counters.

    Not thread safe.
    """

    def __init__(self, num_counters: int) -> None:
        self.freq = CMSketch(num_counters)
        self.door = Bloom(float(num_counters), 0.01)
        self.incrs = 0
        self.reset_at = num_counters

    def push(self, keys) -> None:
        """Record an access for every key in ``keys``."""
        for key in keys:
            self.increment(key)

    def estimate(self, key: int) -> int:
        """Estimated access count of ``key``."""
        hits = self.freq.estimate(key)
        if self.door.has(key):
            hits += 1
        return hits

    def increment(self, key: int) -> None:
        """Record one access of ``key``; halve all counts every ``reset_at`` accesses."""
        if not self.door.add_if_not_has(key):
            self.freq.increment(key)
        self.incrs += 1
        if self.incrs >= self.reset_at:
            self.reset()

    def reset(self) -> None:
        """Clear the doorkeeper and halve the frequency counters."""
        self.incrs = 0
        self.door.clear()
        self.freq.reset()

    def clear(self) -> None:
        """Zero all state."""
        self.incrs = 0
        self.door.clear()
        self.freq.clear()


class Policy:
    """Decides which items are let into the cache and which are evicted.

    Batches of accessed keys handed to :meth:`push` are applied to the
    frequency counters by a background thread until :meth:`close`.
    """

    def __init__(self, num_counters: int, max_cost: int) -> None:
        self.admit = TinyLFU(num_counters)
        self.evict = SampledLFU(max_cost)
        self.metrics: Metrics | None = None
        self._lock = threading.Lock()
        self._items: queue.Queue = queue.Queue(maxsize=_ITEMS_QUEUE_SIZE)
        self._closed = False
        self._worker = threading.Thread(target=self._process_items, daemon=True)
        self._worker.start()

    def _process_items(self) -> None:
        while True:
            items = self._items.get()
            if items is _STOP:
                return
            with self._lock:
                self.admit.push(items)

    def collect_metrics(self, metrics: Metrics) -> None:
        """Record statistics into ``metrics`` from now on."""
        self.metrics = metrics
        self.evict.metrics = metrics

    def set_new_max_cost(self, new_max_cost: int) -> None:
        """Change the total cost the cache may hold."""
        with self._lock:
            self.evict.max_cost = new_max_cost

    def push(self, keys: list[int]) -> bool:
        """Queue a batch of accessed keys; return False if it was dropped."""
        if self._closed:
            raise RuntimeError("policy is closed")
        if not keys:
            return True
        try:
            self._items.put_nowait(keys)
        except queue.Full:
            _record(self.metrics, MetricType.DROP_GETS, keys[0], len(keys))
            return False
        _record(self.metrics, MetricType.KEEP_GETS, keys[0], len(keys))
        return True

    def add(self, key: int, cost: int) -> tuple[list[int] | None, bool]:
        """Try to admit ``key`` with ``cost``.

        Returns the keys evicted to make room (None when no eviction was
        attempted) and whether the key was admitted.
        """
        with self._lock:
            if cost > self.evict.max_cost:
                return None, False
            if self.evict.update_if_has(key, cost):
                return None, True
            room = self.evict.room_left(cost)
            if room >= 0:
                self.evict.add(key, cost)
                _record(self.metrics, MetricType.COST_ADD, key, cost)
                _record(self.metrics, MetricType.KEY_ADD, key, 1)
                return None, True

            incoming_hits = self.admit.estimate(key)
            sample: list[PolicyPair] = []
            victims: list[int] = []
            while room < 0:
                sample = self.evict.fill_sample(sample)
                min_key, min_hits, min_index = 0, sys.maxsize, 0
                for index, pair in enumerate(sample):
                    hits = self.admit.estimate(pair.key)
                    if hits < min_hits:
                        min_key, min_hits, min_index = pair.key, hits, index
                if incoming_hits < min_hits:
                    _record(self.metrics, MetricType.REJECT_SETS, key, 1)
                    return victims, False
                self.evict.delete(min_key)
                sample[min_index] = sample[-1]
                sample.pop()
                victims.append(min_key)
                room = self.evict.room_left(cost)

            self.evict.add(key, cost)
            _record(self.metrics, MetricType.COST_ADD, key, cost)
            _record(self.metrics, MetricType.KEY_ADD, key, 1)
            return victims, True

    def has(self, key: int) -> bool:
        """Whether ``key`` is admitted."""
        with self._lock:
            return key in self.evict.key_costs

    def delete(self, key: int) -> None:
        """Remove ``key`` from the policy."""
        with self._lock:
            self.evict.delete(key)

    def cap(self) -> int:
        """Remaining capacity."""
        with self._lock:
            return self.evict.max_cost - self.evict.used

    def update(self, key: int, cost: int) -> None:
        """Change the cost of an admitted key."""
        with self._lock:
            self.evict.update_if_has(key, cost)

    def cost(self, key: int) -> int:
        """Cost of ``key``, or -1 if it is not admitted."""
        with self._lock:
            return self.evict.key_costs.get(key, -1)

    def clear(self) -> None:
        """Zero all counters and forget every key."""
        with self._lock:
            self.admit.clear()
            self.evict.clear()

    def close(self) -> None:
        """Stop the background thread; later pushes raise RuntimeError."""
        if self._closed:
            raise RuntimeError("policy is closed")
        self._closed = True
        self._items.put(_STOP)
        self._worker.join()