"""A Bloom filter keyed by precomputed 64-bit hashes."""

from __future__ import annotations

import base64
import json
import math

_MASK64 = (1 << 64) - 1
_LN2 = 0.69314718056
_MIN_BITS = 512


def _size_and_exponent(bits: int) -> tuple[int, int]:
    """Round ``bits`` up to a power of two, at least 512; return it and its exponent."""
    bits = max(bits, _MIN_BITS)
    size, exponent = 1, 0
    while size < bits:
        size <<= 1
        exponent += 1
    return size, exponent


def _size_for_false_positive_rate(entries: float, rate: float) -> tuple[int, int]:
    if entries <= 0:
        raise ValueError("number of entries must be positive")
    if rate <= 0:
        raise ValueError("false positive rate must be positive")
    size = -1 * entries * math.log(rate) / math.pow(_LN2, 2)
    locs = math.ceil(_LN2 * size / entries)
    return int(size), int(locs)


class Bloom:
    """Bloom filter over 64-bit hash values.

    ``locs`` below 1 is taken as the wanted false-positive rate, and the
    filter size and number of hash locations are derived from it.
    Otherwise ``entries`` is the number of bits and ``locs`` the number of
    bit locations set per hash.
    """

    def __init__(self, entries: float, locs: float) -> None:
        if locs < 1:
            bits, set_locs = _size_for_false_positive_rate(entries, locs)
        else:
            bits, set_locs = int(entries), int(locs)
        size, exponent = _size_and_exponent(bits)
        self.elem_num = 0
        self.locs = set_locs
        self._mask = size - 1
        self._shift = 64 - exponent
        self._bits = bytearray(size >> 3)

    @property
    def bit_count(self) -> int:
        """Number of bits in the filter."""
        return len(self._bits) * 8

    def _locations(self, hash_value: int):
        hash_value &= _MASK64
        high = hash_value >> self._shift
        low = ((hash_value << self._shift) & _MASK64) >> self._shift
        for i in range(self.locs):
            yield (high + i * low) & self._mask

    def add(self, hash_value: int) -> None:
        """Set every bit location of ``hash_value``."""
        for idx in self._locations(hash_value):
            self.set(idx)
            self.elem_num += 1

    def has(self, hash_value: int) -> bool:
        """Return True if all bit locations of ``hash_value`` are set."""
        return all(self.is_set(idx) for idx in self._locations(hash_value))

    def add_if_not_has(self, hash_value: int) -> bool:
        """Add ``hash_value`` unless present; return True if it was added."""
        if self.has(hash_value):
            return False
        self.add(hash_value)
        return True

    def clear(self) -> None:
        """Reset every bit to zero."""
        self._bits[:] = bytes(len(self._bits))

    def set(self, idx: int) -> None:
        """Set bit ``idx``."""
        self._bits[idx >> 3] |= 1 << (idx % 8)

    def is_set(self, idx: int) -> bool:
        """Return whether bit ``idx`` is set."""
        return (self._bits[idx >> 3] >> (idx % 8)) & 1 == 1

    def to_json(self) -> bytes:
        """Serialise the bit set and location count as JSON."""
        document = {
            "FilterSet": base64.b64encode(bytes(self._bits)).decode("ascii"),
            "SetLocs": self.locs,
        }
        return json.dumps(document, separators=(",", ":")).encode("utf-8")


def bloom_from_json(data: bytes | str) -> Bloom:
    """Rebuild a filter from the output of :meth:`Bloom.to_json`."""
    document = json.loads(data)
    raw = document.get("FilterSet") or ""
    filter_set = base64.b64decode(raw)
    bloom = Bloom(len(filter_set) << 3, document.get("SetLocs", 0))
    bloom._bits[: len(filter_set)] = filter_set
    return bloom