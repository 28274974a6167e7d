"""Key-access simulators for measuring cache hit ratios."""

from __future__ import annotations

import math
import random
import time
from typing import Callable, TextIO

Simulator = Callable[[], int]
Parser = Callable[[str], list]

_MAX_UINT64 = (1 << 64) - 1


class SimulatorDone(Exception):
    """Raised when a simulator's source has run out of values."""

    def __init__(self, message: str = "no more values in the Simulator") -> None:
        super().__init__(message)


class BadLineError(ValueError):
    """Raised when a trace file line is not in the expected format."""

    def __init__(self, message: str = "bad line for trace format") -> None:
        super().__init__(message)


def _seeded_random() -> random.Random:
    return random.Random(time.time_ns())


class _Zipf:
    """Zipf-distributed integers in [0, imax] by rejection-inversion sampling."""

    def __init__(self, rng: random.Random, s: float, v: float, imax: int) -> None:
        if s <= 1.0 or v < 1:
            raise ValueError("zipfian requires s > 1 and v >= 1")
        self._rng = rng
        self._imax = float(imax)
        self._v = v
        self._q = s
        self._one_minus_q = 1.0 - s
        self._one_minus_q_inv = 1.0 / self._one_minus_q
        self._hxm = self._h(self._imax + 0.5)
        self._hx0_minus_hxm = self._h(0.5) - math.exp(math.log(v) * (-s)) - self._hxm
        self._s = 1 - self._hinv(self._h(1.5) - math.exp(-s * math.log(v + 1.0)))

    def _h(self, x: float) -> float:
        return math.exp(self._one_minus_q * math.log(self._v + x)) * self._one_minus_q_inv

    def _hinv(self, x: float) -> float:
        return math.exp(self._one_minus_q_inv * math.log(self._one_minus_q * x)) - self._v

    def __call__(self) -> int:
        while True:
            ur = self._hxm + self._rng.random() * self._hx0_minus_hxm
            x = self._hinv(ur)
            k = math.floor(x + 0.5)
            if k - x <= self._s:
                break
            if ur >= self._h(k + 0.5) - math.exp(-math.log(k + self._v) * self._q):
                break
        return int(k)


def new_zipfian(s: float, v: float, n: int) -> Simulator:
    """Simulator of endless Zipf-distributed keys in [0, n].

    ``s`` must be above 1 and ``v`` at least 1.
    """
    return _Zipf(_seeded_random(), s, v, n)


def new_uniform(maximum: int) -> Simulator:
    """Simulator of endless uniformly distributed keys in [0, maximum)."""
    if maximum <= 0:
        raise ValueError("maximum must be positive")
    rng = _seeded_random()

    def simulator() -> int:
        return rng.randrange(maximum)

    return simulator


def new_reader(parser: Parser, stream: TextIO) -> Simulator:
    """Simulator reading keys line by line from ``stream`` through ``parser``.

    Each line may yield several keys. When the stream is exhausted the
    simulator raises :class:`SimulatorDone`; parse errors are raised as is.
    """
    pending: list[int] = []

    def simulator() -> int:
        while not pending:
            line = stream.readline()
            if isinstance(line, (bytes, bytearray)):
                line = line.decode("utf-8")
            pending.extend(reversed(parser(line)))
        return pending.pop()

    return simulator


def _parse_uint(text: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"invalid unsigned integer: {text!r}")
    value = int(text)
    if value > _MAX_UINT64:
        raise ValueError(f"value out of range: {text!r}")
    return value


def parse_lirs(line: str) -> list[int]:
    """Parse one LIRS trace line, holding a single key."""
    line = line.strip()
    if not line:
        raise SimulatorDone()
    return [_parse_uint(line)]


def parse_arc(line: str) -> list[int]:
    """Parse one ARC trace line: start, count, and two ignored columns.

    Returns the keys ``start`` to ``start + count - 1``.
    """
    if not line:
        raise SimulatorDone()
    cols = line.split()
    if len(cols) != 4:
        raise BadLineError()
    start = _parse_uint(cols[0])
    count = _parse_uint(cols[1])
    return [(start + i) & _MAX_UINT64 for i in range(count)]


def _next_or_zero(simulator: Simulator) -> int:
    try:
        return simulator()
    except (SimulatorDone, ValueError):
        return 0


def collection(simulator: Simulator, size: int) -> list[int]:
    """Draw ``size`` keys from ``simulator``; failed draws count as 0."""
    return [_next_or_zero(simulator) for _ in range(size)]


def string_collection(simulator: Simulator, size: int) -> list[str]:
    """Draw ``size`` keys from ``simulator`` as decimal strings."""
    return [str(key) for key in collection(simulator, size)]