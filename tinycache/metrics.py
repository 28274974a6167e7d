"""Running statistics for a cache instance."""

from __future__ import annotations

import threading
from enum import IntEnum

_MASK64 = (1 << 64) - 1
_STRIPES = 25


class MetricType(IntEnum):
    """Kinds of events counted by :class:`Metrics`."""

    HIT = 0
    MISS = 1
    KEY_ADD = 2
    KEY_UPDATE = 3
    KEY_EVICT = 4
    COST_ADD = 5
    COST_EVICT = 6
    DROP_SETS = 7
    REJECT_SETS = 8
    DROP_GETS = 9
    KEEP_GETS = 10


_NAMES = {
    MetricType.HIT: "hit",
    MetricType.MISS: "miss",
    MetricType.KEY_ADD: "keys-added",
    MetricType.KEY_UPDATE: "keys-updated",
    MetricType.KEY_EVICT: "keys-evicted",
    MetricType.COST_ADD: "cost-added",
    MetricType.COST_EVICT: "cost-evicted",
    MetricType.DROP_SETS: "sets-dropped",
    MetricType.REJECT_SETS: "sets-rejected",
    MetricType.DROP_GETS: "gets-dropped",
    MetricType.KEEP_GETS: "gets-kept",
}


def metric_name(kind: int) -> str:
    """Return the display name of a metric kind, or "unidentified"."""
    try:
        return _NAMES[MetricType(kind)]
    except ValueError:
        return "unidentified"


class Metrics:
    """Counters of hits, misses, additions, evictions and dropped work.

    Counters are unsigned 64-bit values; a negative delta wraps around,
    so adding ``-n`` undoes an earlier addition of ``n``.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters = {kind: [0] * _STRIPES for kind in MetricType}

    def add(self, kind: MetricType, hash_value: int, delta: int) -> None:
        """Add ``delta`` to the counter of ``kind``; ``hash_value`` picks a stripe."""
        stripe = hash_value % _STRIPES
        with self._lock:
            counters = self._counters[MetricType(kind)]
            counters[stripe] = (counters[stripe] + delta) & _MASK64

    def get(self, kind: MetricType) -> int:
        """Return the total of the counter of ``kind``."""
        with self._lock:
            return sum(self._counters[MetricType(kind)]) & _MASK64

    def hits(self) -> int:
        """Get calls that found a value."""
        return self.get(MetricType.HIT)

    def misses(self) -> int:
        """Get calls that found no value."""
        return self.get(MetricType.MISS)

    def keys_added(self) -> int:
        """Set calls that added a new item."""
        return self.get(MetricType.KEY_ADD)

    def keys_updated(self) -> int:
        """Set calls that updated an existing item."""
        return self.get(MetricType.KEY_UPDATE)

    def keys_evicted(self) -> int:
        """Items evicted."""
        return self.get(MetricType.KEY_EVICT)

    def cost_added(self) -> int:
        """Sum of the costs of added items."""
        return self.get(MetricType.COST_ADD)

    def cost_evicted(self) -> int:
        """Sum of the costs of evicted items."""
        return self.get(MetricType.COST_EVICT)

    def sets_dropped(self) -> int:
        """Set calls that did not reach the internal buffers."""
        return self.get(MetricType.DROP_SETS)

    def sets_rejected(self) -> int:
        """Set calls rejected by the admission policy."""
        return self.get(MetricType.REJECT_SETS)

    def gets_dropped(self) -> int:
        """Get counter increments that were dropped."""
        return self.get(MetricType.DROP_GETS)

    def gets_kept(self) -> int:
        """Get counter increments that were kept."""
        return self.get(MetricType.KEEP_GETS)

    def ratio(self) -> float:
        """Hits over all accesses, or 0.0 when there were none."""
        hits, misses = self.hits(), self.misses()
        if hits == 0 and misses == 0:
            return 0.0
        return hits / (hits + misses)

    def clear(self) -> None:
        """Zero every counter."""
        with self._lock:
            for counters in self._counters.values():
                counters[:] = [0] * _STRIPES

    def __str__(self) -> str:
        parts = [f"{metric_name(kind)}: {self.get(kind)} " for kind in MetricType]
        parts.append(f"gets-total: {self.hits() + self.misses()} ")
        parts.append(f"hit-ratio: {self.ratio():.2f}")
        return "".join(parts)