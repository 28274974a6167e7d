"""Count-min sketch with 4-bit counters, used for access-frequency estimates."""

from __future__ import annotations

import random

CM_DEPTH = 4
_MASK64 = (1 << 64) - 1
_MAX_COUNTER = 15

# Halves both 4-bit counters packed into a byte.
_HALVE = bytes(((b >> 1) & 0x77) for b in range(256))


def next_power_of_two(x: int) -> int:
    """Round ``x`` up to the next power of two; a power of two is returned unchanged."""
    if x <= 0:
        return 0
    return 1 << (x - 1).bit_length()


class CMRow:
    """A row of 4-bit counters, two per byte."""

    def __init__(self, num_counters: int) -> None:
        self._data = bytearray(num_counters // 2)

    def __len__(self) -> int:
        return len(self._data) * 2

    def get(self, n: int) -> int:
        """Return the value of counter ``n``."""
        return (self._data[n // 2] >> ((n & 1) * 4)) & 0x0F

    def increment(self, n: int) -> None:
        """Increment counter ``n`` unless it is already at its maximum."""
        index = n // 2
        shift = (n & 1) * 4
        if (self._data[index] >> shift) & 0x0F < _MAX_COUNTER:
            self._data[index] += 1 << shift

    def reset(self) -> None:
        """Halve every counter."""
        self._data[:] = self._data.translate(_HALVE)

    def clear(self) -> None:
        """Zero every counter."""
        self._data[:] = bytes(len(self._data))

    def __str__(self) -> str:
        return " ".join(f"{self.get(i):02d}" for i in range(len(self)))


class CMSketch:
    """Count-min sketch of ``CM_DEPTH`` rows of 4-bit counters."""

    def __init__(self, num_counters: int) -> None:
        if num_counters <= 0:
            raise ValueError("cmSketch: bad numCounters")
        num_counters = next_power_of_two(num_counters)
        self.mask = num_counters - 1
        source = random.SystemRandom()
        self.seeds = [source.getrandbits(64) for _ in range(CM_DEPTH)]
        self.rows = [CMRow(num_counters) for _ in range(CM_DEPTH)]

    def _positions(self, hashed: int):
        hashed &= _MASK64
        for row, seed in zip(self.rows, self.seeds):
            yield row, (hashed ^ seed) & self.mask

    def increment(self, hashed: int) -> None:
        """Increment the counters for ``hashed``."""
        for row, position in self._positions(hashed):
            row.increment(position)

    def estimate(self, hashed: int) -> int:
        """Return the estimated count for ``hashed``."""
        return min(row.get(position) for row, position in self._positions(hashed))

    def reset(self) -> None:
        """Halve all counters."""
        for row in self.rows:
            row.reset()

    def clear(self) -> None:
        """Zero all counters."""
        for row in self.rows:
            row.clear()