"""Generic object pools with usage metrics."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class ObjectMetrics:
    """Usage counters of an object pool."""

    total_get: int = 0
    total_put: int = 0
    total_new: int = 0
    current_active: int = 0


class ObjectPool(Generic[T]):
    """Pool built from a factory and an optional reset hook.

    The reset hook is called with each returned object; if it returns
    something other than None, that value is pooled instead.
    """

    def __init__(self, factory: Callable[[], T], reset: Callable[[T], T | None] | None = None) -> None:
        self._factory = factory
        self._reset = reset
        self._lock = threading.Lock()
        self._free: list[T] = []
        self._metrics = ObjectMetrics()

    def get(self) -> T:
        with self._lock:
            self._metrics.total_get += 1
            self._metrics.current_active += 1
            if self._free:
                return self._free.pop()
            self._metrics.total_new += 1
        return self._factory()

    def put(self, obj: T) -> None:
        with self._lock:
            self._metrics.total_put += 1
            self._metrics.current_active -= 1
        if self._reset is not None:
            replacement = self._reset(obj)
            if replacement is not None:
                obj = replacement
        with self._lock:
            self._free.append(obj)

    def get_metrics(self) -> ObjectMetrics:
        with self._lock:
            return replace(self._metrics)


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(name for name in slots if name not in ("__dict__", "__weakref__"))
    return names


class StructPool:
    """Pool of instances of one class, reset to a fresh instance's state on return.

    The class must be constructible without arguments.
    """

    def __init__(self, example: Any) -> None:
        self._type: type = example if isinstance(example, type) else type(example)
        self._lock = threading.Lock()
        self._free: list[Any] = []
        self._metrics = ObjectMetrics()

    def get(self) -> Any:
        with self._lock:
            self._metrics.total_get += 1
            self._metrics.current_active += 1
            if self._free:
                return self._free.pop()
            self._metrics.total_new += 1
        return self._type()

    def put(self, obj: Any) -> None:
        """Reset and pool an instance; None is ignored, other types are dropped."""
        if obj is None:
            return
        with self._lock:
            self._metrics.total_put += 1
            self._metrics.current_active -= 1
        if not isinstance(obj, self._type):
            return
        self._reset(obj)
        with self._lock:
            self._free.append(obj)

    def _reset(self, obj: Any) -> None:
        fresh = self._type()
        if hasattr(fresh, "__dict__"):
            obj.__dict__.clear()
            obj.__dict__.update(fresh.__dict__)
        for name in _slot_names(self._type):
            if hasattr(fresh, name):
                setattr(obj, name, getattr(fresh, name))
            elif hasattr(obj, name):
                delattr(obj, name)

    def get_metrics(self) -> ObjectMetrics:
        with self._lock:
            return replace(self._metrics)