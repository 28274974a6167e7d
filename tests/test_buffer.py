import pytest

from tinycache.buffer import Buffers, Pool, assign_pool, get_buffer, put_buffer


@pytest.mark.parametrize("offset", range(4))
def test_assign_pool_default(offset):
    size = 64 * 1024 + offset
    pool = assign_pool(size)
    assert pool.size >= size
    buf = get_buffer(size)
    assert len(buf) >= size
    put_buffer(buf)


@pytest.mark.parametrize(
    "size, aligned",
    [(1, 1024), (1024, 1024), (1025, 2048), (64 * 1024 + 1, 65 * 1024), (0, 0)],
)
def test_alignment(size, aligned):
    assert Buffers(1024).assign_pool(size).size == aligned


def test_same_pool_for_same_aligned_size():
    buffers = Buffers(1024)
    assert buffers.assign_pool(10) is buffers.assign_pool(1000)
    assert buffers.assign_pool(10) is not buffers.assign_pool(1025)


def test_page_size_below_one_means_exact_sizes():
    buffers = Buffers(0)
    assert buffers.page_size == 1
    assert buffers.assign_pool(7).size == 7


def test_buffer_is_reused_after_put():
    buffers = Buffers(16)
    first = buffers.get_buffer(10)
    assert len(first) == 10
    backing = first.obj
    assert len(backing) == 16
    buffers.put_buffer(first)
    second = buffers.get_buffer(12)
    assert second.obj is backing
    assert len(second) == 12


def test_too_small_buffer_is_not_pooled():
    pool = Pool(32)
    pool.put_buffer(bytearray(10))
    buf = pool.get_buffer(32)
    assert len(buf.obj) == 32


def test_request_larger_than_pool_is_rejected():
    with pytest.raises(ValueError):
        Pool(16).get_buffer(17)