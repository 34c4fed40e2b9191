"""Size-classed pools of fixed-capacity byte slices."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

DEFAULT_SIZES: tuple[int, ...] = (
    512,
    1024,
    2048,
    4096,
    8192,
    16384,
    32768,
    65536,
    131072,
    262144,
    524288,
    1048576,
)


@dataclass
class SizeMetric:
    """Usage counters for one size class."""

    size: int
    total_get: int = 0
    total_put: int = 0
    total_new: int = 0
    current_active: int = 0
    total_bytes_wasted: int = 0


def _capacity(buf: memoryview | bytearray) -> int:
    if isinstance(buf, memoryview):
        return len(buf.obj)
    return len(buf)


def _backing(buf: memoryview | bytearray) -> bytearray | None:
    base = buf.obj if isinstance(buf, memoryview) else buf
    return base if isinstance(base, bytearray) else None


class ByteSlicePool:
    """Hands out writable views of at least the requested length.

    Each view is a ``memoryview`` onto a ``bytearray`` whose length is one of
    the pool's sizes; the view's ``obj`` is that full-size backing array.
    Requests larger than every size class are allocated directly.
    """

    def __init__(self, sizes: Iterable[int] = DEFAULT_SIZES) -> None:
        self._sizes: list[int] = list(sizes)
        self._lock = threading.Lock()
        self._free: dict[int, list[bytearray]] = {size: [] for size in self._sizes}
        self._metrics: dict[int, SizeMetric] = {size: SizeMetric(size) for size in self._sizes}

    def _take(self, size: int) -> bytearray:
        with self._lock:
            metric = self._metrics[size]
            metric.total_get += 1
            metric.current_active += 1
            free = self._free[size]
            if free:
                return free.pop()
            metric.total_new += 1
        return bytearray(size)

    def get(self, n: int) -> memoryview:
        """Return a view of length ``n``; an empty view when ``n`` is not positive."""
        if n <= 0:
            return memoryview(bytearray())
        size = next((s for s in self._sizes if s >= n), None)
        if size is None:
            return memoryview(bytearray(n))
        return memoryview(self._take(size))[:n]

    def get_exact(self, size: int) -> memoryview:
        """Return a full view of a size class when ``size`` is one, else as ``get``."""
        if size in self._metrics:
            return memoryview(self._take(size))
        return self.get(size)

    def put(self, buf: memoryview | bytearray | None) -> None:
        """Give a view back; views not backed by one of the size classes are ignored."""
        if buf is None:
            return
        capacity = _capacity(buf)
        backing = _backing(buf)
        if capacity not in self._metrics or backing is None:
            return
        waste = capacity - len(buf)
        with self._lock:
            metric = self._metrics[capacity]
            metric.total_put += 1
            metric.current_active -= 1
            if waste > 0:
                metric.total_bytes_wasted += waste
            self._free[capacity].append(backing)

    def get_metrics(self) -> dict[int, SizeMetric]:
        """Return a snapshot of the counters of every size class."""
        with self._lock:
            return {size: replace(metric) for size, metric in self._metrics.items()}


DEFAULT_BYTE_SLICE_POOL = ByteSlicePool()


def get_bytes(n: int) -> memoryview:
    """Take a view from the default pool."""
    return DEFAULT_BYTE_SLICE_POOL.get(n)


def put_bytes(buf: memoryview | bytearray | None) -> None:
    """Return a view to the default pool."""
    DEFAULT_BYTE_SLICE_POOL.put(buf)