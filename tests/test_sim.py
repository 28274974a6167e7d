import io
from collections import Counter

import pytest

from tinycache.sim import (
    BadLineError,
    SimulatorDone,
    collection,
    new_reader,
    new_uniform,
    new_zipfian,
    parse_arc,
    parse_lirs,
    string_collection,
)


def test_zipfian_is_skewed():
    s = new_zipfian(1.5, 1, 100)
    counts = Counter(s() for _ in range(100))
    assert 0 < len(counts) < 100


def test_zipfian_values_in_range():
    s = new_zipfian(1.1, 1, 10)
    values = [s() for _ in range(1000)]
    assert all(0 <= v <= 10 for v in values)
    assert Counter(values).most_common(1)[0][0] == 0


@pytest.mark.parametrize("s, v", [(1.0, 1), (0.5, 1), (1.5, 0.5)])
def test_zipfian_rejects_bad_parameters(s, v):
    with pytest.raises(ValueError):
        new_zipfian(s, v, 100)


def test_uniform():
    s = new_uniform(100)
    values = [s() for _ in range(100)]
    assert all(0 <= v < 100 for v in values)


def test_uniform_rejects_zero():
    with pytest.raises(ValueError):
        new_uniform(0)


def test_parse_lirs_reader():
    s = new_reader(parse_lirs, io.BytesIO(b"0\n1\r\n2\r\n"))
    assert [s() for _ in range(3)] == [0, 1, 2]
    with pytest.raises(SimulatorDone):
        s()


def test_parse_lirs_text_stream():
    s = new_reader(parse_lirs, io.StringIO("7\n8\n"))
    assert s() == 7
    assert s() == 8


def test_parse_lirs_line():
    assert parse_lirs("42\r\n") == [42]
    with pytest.raises(SimulatorDone):
        parse_lirs("")
    with pytest.raises(ValueError):
        parse_lirs("abc\n")


def test_parse_arc_reader():
    s = new_reader(parse_arc, io.BytesIO(b"127 64 0 0\r\n191 36 0 0\r\n"))
    for i in range(100):
        assert s() == 127 + i
    with pytest.raises(SimulatorDone):
        s()


def test_parse_arc_line():
    assert parse_arc("0 5 0 0\n") == [0, 1, 2, 3, 4]
    with pytest.raises(BadLineError):
        parse_arc("1 2 3\n")
    with pytest.raises(ValueError):
        parse_arc("x 2 0 0\n")
    with pytest.raises(SimulatorDone):
        parse_arc("")


def test_reader_propagates_bad_line():
    s = new_reader(parse_arc, io.StringIO("1 2\n"))
    with pytest.raises(BadLineError):
        s()


def test_collection():
    c = collection(new_uniform(100), 100)
    assert len(c) == 100
    assert all(0 <= v < 100 for v in c)


def test_collection_pads_exhausted_source_with_zero():
    s = new_reader(parse_lirs, io.StringIO("5\n6\n"))
    assert collection(s, 4) == [5, 6, 0, 0]


def test_string_collection():
    c = string_collection(new_uniform(100), 100)
    assert len(c) == 100
    assert all(0 <= int(v) < 100 for v in c)


def test_string_collection_values():
    s = new_reader(parse_arc, io.StringIO("10 3 0 0\n"))
    assert string_collection(s, 3) == ["10", "11", "12"]