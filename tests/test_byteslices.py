import threading

from gortex.pool.byteslices import (
    DEFAULT_BYTE_SLICE_POOL,
    ByteSlicePool,
    get_bytes,
    put_bytes,
)


def test_byte_slice_pool_various_sizes():
    pool = ByteSlicePool()
    for size in [100, 500, 1000, 5000, 10000]:
        buf = pool.get(size)
        assert len(buf) == size
        assert len(buf.obj) >= size
        for i in range(size):
            buf[i] = i % 256
        assert buf[size - 1] == (size - 1) % 256
        pool.put(buf)

    metrics = pool.get_metrics()
    assert metrics[512].total_get == 2
    assert metrics[1024].total_get == 1
    assert metrics[8192].total_get == 1
    assert metrics[16384].total_get == 1
    assert metrics[512].total_new == 1


def test_byte_slice_pool_exact_size():
    pool = ByteSlicePool([512, 1024, 2048])

    buf = pool.get_exact(1024)
    assert len(buf) == 1024
    assert len(buf.obj) == 1024
    pool.put(buf)

    buf2 = pool.get_exact(1000)
    assert len(buf2) == 1000
    assert len(buf2.obj) >= 1000
    assert pool.get_metrics()[1024].total_get == 2


def test_byte_slice_pool_large_size():
    pool = ByteSlicePool()
    large = 10 * 1024 * 1024
    buf = pool.get(large)
    assert len(buf) == large
    pool.put(buf)

    for metric in pool.get_metrics().values():
        assert metric.total_get == 0
        assert metric.total_put == 0


def test_byte_slice_pool_wasted_bytes():
    pool = ByteSlicePool()
    buf = pool.get(100)
    assert len(buf) == 100
    assert len(buf.obj) >= 512
    pool.put(buf)
    assert pool.get_metrics()[512].total_bytes_wasted == 412


def test_byte_slice_pool_reuses_backing_array():
    pool = ByteSlicePool()
    first = pool.get(100)
    backing = first.obj
    pool.put(first)
    second = pool.get(200)
    assert second.obj is backing
    assert len(second) == 200
    assert pool.get_metrics()[512].total_new == 1


def test_byte_slice_pool_non_positive_request():
    pool = ByteSlicePool()
    assert len(pool.get(0)) == 0
    assert len(pool.get(-5)) == 0
    assert all(m.total_get == 0 for m in pool.get_metrics().values())


def test_byte_slice_pool_ignores_foreign_buffers():
    pool = ByteSlicePool([512])
    pool.put(bytearray(300))
    pool.put(None)
    assert pool.get_metrics()[512].total_put == 0


def test_byte_slice_pool_concurrency():
    pool = ByteSlicePool()

    def work():
        for j in range(100):
            buf = pool.get(100 + (j % 1000))
            for k in range(len(buf)):
                buf[k] = k % 256
            pool.put(buf)

    threads = [threading.Thread(target=work) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for metric in pool.get_metrics().values():
        assert metric.current_active == 0
        assert metric.total_get == metric.total_put
    assert pool.get_metrics()[512].total_get == 1000


def test_default_byte_slice_pool():
    before = DEFAULT_BYTE_SLICE_POOL.get_metrics()[512]
    buf = get_bytes(256)
    assert len(buf) == 256
    put_bytes(buf)
    after = DEFAULT_BYTE_SLICE_POOL.get_metrics()[512]
    assert after.total_get - before.total_get == 1
    assert after.total_put - before.total_put == 1