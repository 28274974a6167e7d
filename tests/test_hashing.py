import pytest

from tinycache.hashing import (
    cpu_ticks,
    fast_rand,
    key_to_hash,
    mem_hash,
    mem_hash_string,
    nano_time,
    xxhash64,
)

MAX_UINT64 = (1 << 64) - 1


@pytest.mark.parametrize(
    "key, expected",
    [
        (1, (1, 0)),
        (2, (2, 0)),
        (-2, (MAX_UINT64 - 1, 0)),
        (3, (3, 0)),
        (0xFF, (255, 0)),
    ],
)
def test_key_to_hash_integers(key, expected):
    assert key_to_hash(key) == expected


def test_key_to_hash_none():
    assert key_to_hash(None) == (0, 0)


def test_key_to_hash_string_and_bytes_agree():
    assert key_to_hash("hello") == key_to_hash(b"hello")
    assert key_to_hash("hello") == (mem_hash(b"hello"), xxhash64(b"hello"))


def test_key_to_hash_unsupported_type():
    with pytest.raises(TypeError):
        key_to_hash(1.5)
    with pytest.raises(TypeError):
        key_to_hash(True)


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"", 0xEF46DB3751D8E999),
        (b"abc", 0x44BC2CF5AD770999),
        (b"Nobody inspects the spammish repetition", 0xFBCEA83C8A378BF1),
    ],
)
def test_xxhash64_known_values(data, expected):
    assert xxhash64(data) == expected


def test_xxhash64_seed_is_used():
    data = b"x" * 100
    assert xxhash64(data, 7) == xxhash64(data, 7)
    assert xxhash64(data, 7) != xxhash64(data, 8)


def test_mem_hash_is_stable_in_process():
    assert mem_hash(b"abc") == mem_hash(bytearray(b"abc"))
    assert 0 <= mem_hash(b"abc") <= MAX_UINT64


def test_mem_hash_string_matches_bytes():
    assert mem_hash_string("héllo") == mem_hash("héllo".encode("utf-8"))


def test_clocks_do_not_go_backwards():
    first, second = nano_time(), nano_time()
    assert second >= first
    t1, t2 = cpu_ticks(), cpu_ticks()
    assert t2 >= t1


def test_fast_rand_range():
    values = [fast_rand() for _ in range(100)]
    assert all(0 <= v < 1 << 32 for v in values)