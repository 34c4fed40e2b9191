"""Pool of reusable byte buffers with usage metrics."""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace

_INITIAL_CAPACITY = 1024
_MAX_POOLED_SIZE = 1024 * 1024


@dataclass
class BufferMetrics:
    """Usage counters of a buffer pool.

    ``reuse_rate`` is worked out when the metrics are read.
    """

    total_get: int = 0
    total_put: int = 0
    total_new: int = 0
    current_active: int = 0
    total_bytes_allocated: int = 0
    largest_buffer: int = 0
    reuse_rate: float = 0.0


class BufferPool:
    """Hands out empty ``bytearray`` buffers and takes them back for reuse.

    Buffers longer than 1 MiB when returned are dropped rather than pooled.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._free: list[bytearray] = []
        self._metrics = BufferMetrics()

    def get(self) -> bytearray:
        """Return an empty buffer, reusing a pooled one when there is one."""
        with self._lock:
            self._metrics.total_get += 1
            self._metrics.current_active += 1
            if self._free:
                buf = self._free.pop()
            else:
                self._metrics.total_new += 1
                self._metrics.total_bytes_allocated += _INITIAL_CAPACITY
                buf = bytearray()
        buf.clear()
        return buf

    def put(self, buf: bytearray | None) -> None:
        """Give a buffer back; None is ignored."""
        if buf is None:
            return
        size = len(buf)
        with self._lock:
            self._metrics.total_put += 1
            self._metrics.current_active -= 1
            self._metrics.largest_buffer = max(self._metrics.largest_buffer, size)
            if size > _MAX_POOLED_SIZE:
                return
            self._free.append(buf)

    def get_metrics(self) -> BufferMetrics:
        """Return a snapshot of the counters, with the reuse rate filled in."""
        with self._lock:
            snapshot = replace(self._metrics)
        if snapshot.total_get > 0:
            snapshot.reuse_rate = (snapshot.total_get - snapshot.total_new) / snapshot.total_get
        else:
            snapshot.reuse_rate = 0.0
        return snapshot

    def reset_metrics(self) -> None:
        """Zero every counter."""
        with self._lock:
            self._metrics = BufferMetrics()


DEFAULT_BUFFER_POOL = BufferPool()


def get_buffer() -> bytearray:
    """Take a buffer from the default pool."""
    return DEFAULT_BUFFER_POOL.get()


def put_buffer(buf: bytearray | None) -> None:
    """Return a buffer to the default pool."""
    DEFAULT_BUFFER_POOL.put(buf)