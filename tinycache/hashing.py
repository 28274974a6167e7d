"""Hash functions and runtime helpers used by the cache."""

from __future__ import annotations

import random
import struct
import time

_MASK64 = (1 << 64) - 1

_P1 = 11400714785074694791
_P2 = 14029467366897019727
_P3 = 1609587929392839161
_P4 = 9650029242287828579
_P5 = 2870177450012600261


def mem_hash(data: bytes | bytearray | memoryview) -> int:
    """Fast 64-bit hash of ``data``.

    The seed changes for every process, so the result must not be persisted.
    """
    return hash(bytes(data)) & _MASK64


def mem_hash_string(text: str) -> int:
    """Fast 64-bit hash of the UTF-8 bytes of ``text``; process-seeded."""
    return mem_hash(text.encode("utf-8"))


def nano_time() -> int:
    """Current time in nanoseconds from a monotonic clock."""
    return time.monotonic_ns()


def cpu_ticks() -> int:
    """High-resolution tick counter for measuring durations."""
    return time.perf_counter_ns()


def fast_rand() -> int:
    """Random unsigned 32-bit integer."""
    return random.getrandbits(32)


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK64


def _round(acc: int, lane: int) -> int:
    acc = (acc + lane * _P2) & _MASK64
    return (_rotl(acc, 31) * _P1) & _MASK64


def _merge_round(acc: int, value: int) -> int:
    acc ^= _round(0, value)
    return (acc * _P1 + _P4) & _MASK64


def xxhash64(data: bytes | bytearray | memoryview, seed: int = 0) -> int:
    """XXH64 digest of ``data``."""
    data = bytes(data)
    length = len(data)
    seed &= _MASK64
    pos = 0

    if length >= 32:
        v1 = (seed + _P1 + _P2) & _MASK64
        v2 = (seed + _P2) & _MASK64
        v3 = seed
        v4 = (seed - _P1) & _MASK64
        limit = length - 32
        while pos <= limit:
            a, b, c, d = struct.unpack_from("<4Q", data, pos)
            v1 = _round(v1, a)
            v2 = _round(v2, b)
            v3 = _round(v3, c)
            v4 = _round(v4, d)
            pos += 32
        h = (_rotl(v1, 1) + _rotl(v2, 7) + _rotl(v3, 12) + _rotl(v4, 18)) & _MASK64
        for v in (v1, v2, v3, v4):
            h = _merge_round(h, v)
    else:
        h = (seed + _P5) & _MASK64

    h = (h + length) & _MASK64

    while pos + 8 <= length:
        (lane,) = struct.unpack_from("<Q", data, pos)
        h ^= _round(0, lane)
        h = (_rotl(h, 27) * _P1 + _P4) & _MASK64
        pos += 8

    if pos + 4 <= length:
        (lane,) = struct.unpack_from("<I", data, pos)
        h ^= (lane * _P1) & _MASK64
        h = (_rotl(h, 23) * _P2 + _P3) & _MASK64
        pos += 4

    for byte in data[pos:]:
        h ^= (byte * _P5) & _MASK64
        h = (_rotl(h, 11) * _P1) & _MASK64

    h ^= h >> 33
    h = (h * _P2) & _MASK64
    h ^= h >> 29
    h = (h * _P3) & _MASK64
    h ^= h >> 32
    return h


def key_to_hash(key) -> tuple[int, int]:
    """Turn a cache key into a (hash, conflict-hash) pair.

    Integers map to their unsigned 64-bit value with no conflict hash;
    strings and bytes get a fast hash and an xxhash64 conflict hash.
    """
    if key is None:
        return 0, 0
    if isinstance(key, bool):
        raise TypeError("key type not supported")
    if isinstance(key, int):
        return key & _MASK64, 0
    if isinstance(key, str):
        raw = key.encode("utf-8")
        return mem_hash(raw), xxhash64(raw)
    if isinstance(key, (bytes, bytearray, memoryview)):
        raw = bytes(key)
        return mem_hash(raw), xxhash64(raw)
    raise TypeError("key type not supported")