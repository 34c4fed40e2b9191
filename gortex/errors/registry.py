"""Registry mapping domain exceptions to error codes and HTTP statuses."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from http import HTTPStatus

from .codes import ErrorCode, message_for
from .helpers import get_http_status
from .response import ErrorResponse, new


@dataclass(frozen=True)
class ErrorMapping:
    code: int
    http_status: int
    message: str


def _unwrap(err: BaseException) -> BaseException | None:
    if err.__cause__ is not None:
        return err.__cause__
    if not err.__suppress_context__:
        return err.__context__
    return None


def error_type_name(err: BaseException | None) -> str:
    """Return the qualified type name of an exception, or "" for None."""
    if err is None:
        return ""
    cls = type(err)
    module = cls.__module__
    if module and module != "builtins":
        return f"{module}.{cls.__qualname__}"
    return cls.__qualname__


class ErrorRegistry:
    """Thread-safe lookup from exception instances or types to error mappings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._mappings: dict[int, tuple[BaseException, ErrorMapping]] = {}
        self._type_mappings: dict[str, ErrorMapping] = {}

    def register(self, err: BaseException, code: int, http_status: int, message: str = "") -> None:
        """Map one specific exception instance."""
        mapping = ErrorMapping(int(code), int(http_status), message or message_for(code))
        with self._lock:
            self._mappings[id(err)] = (err, mapping)

    def register_type(
        self, error_type_name: str, code: int, http_status: int, message: str = ""
    ) -> None:
        """Map every exception whose qualified type name is ``error_type_name``."""
        mapping = ErrorMapping(int(code), int(http_status), message or message_for(code))
        with self._lock:
            self._type_mappings[error_type_name] = mapping

    def register_simple(self, err: BaseException, code: int) -> None:
        self.register(err, code, get_http_status(code), "")

    def get_mapping(self, err: BaseException | None) -> ErrorMapping | None:
        """Find a mapping for ``err`` or, failing that, for the errors it wraps."""
        seen: set[int] = set()
        with self._lock:
            current = err
            while current is not None and id(current) not in seen:
                seen.add(id(current))
                entry = self._mappings.get(id(current))
                if entry is not None and entry[0] is current:
                    return entry[1]
                by_type = self._type_mappings.get(error_type_name(current))
                if by_type is not None:
                    return by_type
                current = _unwrap(current)
        return None

    def clear(self) -> None:
        with self._lock:
            self._mappings.clear()
            self._type_mappings.clear()


_global_registry = ErrorRegistry()


def register(err: BaseException, code: int, http_status: int, message: str = "") -> None:
    _global_registry.register(err, code, http_status, message)


def register_type(error_type_name: str, code: int, http_status: int, message: str = "") -> None:
    _global_registry.register_type(error_type_name, code, http_status, message)


def register_simple(err: BaseException, code: int) -> None:
    _global_registry.register_simple(err, code)


def get_mapping(err: BaseException | None) -> ErrorMapping | None:
    return _global_registry.get_mapping(err)


def clear_global_registry() -> None:
    _global_registry.clear()


def handle_business_error(err: BaseException | None) -> tuple[int, ErrorResponse | None]:
    """Turn an exception into an HTTP status and error response."""
    if err is None:
        return int(HTTPStatus.OK), None
    if isinstance(err, ErrorResponse):
        return get_http_status(err.detail.code), err
    mapping = get_mapping(err)
    if mapping is not None:
        return mapping.http_status, new(mapping.code, mapping.message).with_detail("error", str(err))
    resp = new(ErrorCode.INTERNAL_SERVER_ERROR, "An error occurred").with_detail("error", str(err))
    return int(HTTPStatus.INTERNAL_SERVER_ERROR), resp