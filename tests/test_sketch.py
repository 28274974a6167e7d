import pytest

from tinycache.sketch import CM_DEPTH, CMRow, CMSketch, next_power_of_two


def test_sketch_rounds_up_to_power_of_two():
    s = CMSketch(5)
    assert s.mask == 7


def test_sketch_rejects_zero_counters():
    with pytest.raises(ValueError):
        CMSketch(0)


def test_sketch_increment_rows_differ():
    s = CMSketch(16)
    s.increment(1)
    s.increment(5)
    s.increment(9)
    strings = {str(row) for row in s.rows}
    assert len(strings) > 1
    assert len(s.rows) == CM_DEPTH


def test_sketch_estimate():
    s = CMSketch(16)
    s.increment(1)
    s.increment(1)
    assert s.estimate(1) == 2
    assert s.estimate(0) == 0


def test_sketch_reset():
    s = CMSketch(16)
    for _ in range(4):
        s.increment(1)
    s.reset()
    assert s.estimate(1) == 2


def test_sketch_clear():
    s = CMSketch(16)
    for i in range(16):
        s.increment(i)
    s.clear()
    assert all(s.estimate(i) == 0 for i in range(16))


def test_sketch_counters_saturate():
    s = CMSketch(16)
    for _ in range(40):
        s.increment(3)
    assert s.estimate(3) == 15


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (1, 1), (2, 2), (3, 4), (5, 8), (16, 16), (17, 32)],
)
def test_next_power_of_two(value, expected):
    assert next_power_of_two(value) == expected


def test_row_increment_and_get_use_separate_nibbles():
    row = CMRow(4)
    row.increment(0)
    row.increment(1)
    row.increment(1)
    assert row.get(0) == 1
    assert row.get(1) == 2
    assert row.get(2) == 0
    assert str(row) == "01 02 00 00"


def test_row_saturates_at_fifteen():
    row = CMRow(2)
    for _ in range(20):
        row.increment(1)
    assert row.get(1) == 15
    assert row.get(0) == 0


def test_row_reset_halves_each_counter():
    row = CMRow(2)
    for _ in range(15):
        row.increment(0)
    for _ in range(6):
        row.increment(1)
    row.reset()
    assert row.get(0) == 7
    assert row.get(1) == 3


def test_row_clear():
    row = CMRow(4)
    for n in range(4):
        row.increment(n)
    row.clear()
    assert [row.get(n) for n in range(4)] == [0, 0, 0, 0]