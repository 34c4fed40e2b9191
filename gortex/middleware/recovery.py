"""Middleware that turns unexpected exceptions into a 500 response.

Exceptions that already describe an HTTP error (``ErrorResponse`` or anything
with an integer ``status_code``) are ordinary errors and propagate unchanged.
"""

from __future__ import annotations

import logging
import sys
import threading
import traceback
from collections.abc import Callable
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any

from ..errors.response import ErrorResponse
from ..web import Context

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]

DEFAULT_STACK_SIZE = 4 << 10
_INTERNAL_MARKERS = ("/threading.py", "/runpy.py", "/http/server.py", "/socketserver.py")


@dataclass
class RecoveryConfig:
    """Settings of the recovery middleware; ``stack_size`` is in characters."""

    logger: logging.Logger | logging.LoggerAdapter | None = None
    stack_size: int = DEFAULT_STACK_SIZE
    disable_stack_all: bool = False
    disable_print_stack: bool = False


def recovery() -> Middleware:
    """Recovery middleware with the default settings."""
    return recovery_with_config(RecoveryConfig())


def _is_http_error(exc: BaseException) -> bool:
    if isinstance(exc, ErrorResponse):
        return True
    status = getattr(exc, "status_code", None)
    return isinstance(status, int) and not isinstance(status, bool)


def _capture_stack(exc: BaseException, all_threads: bool, limit: int) -> str:
    text = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    if all_threads:
        current = threading.get_ident()
        names = {thread.ident: thread.name for thread in threading.enumerate()}
        for ident, frame in sys._current_frames().items():
            if ident == current:
                continue
            text += f"\nThread {names.get(ident, ident)}:\n" + "".join(traceback.format_stack(frame))
    return text[:limit]


def _format_stack(stack: str) -> list[str]:
    lines = (line.strip() for line in stack.split("\n"))
    return [line for line in lines if line and not any(m in line for m in _INTERNAL_MARKERS)]


def recovery_with_config(config: RecoveryConfig | None) -> Middleware:
    """Recovery middleware with custom settings."""
    config = replace(config) if config is not None else RecoveryConfig()
    if config.stack_size == 0:
        config.stack_size = DEFAULT_STACK_SIZE

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            try:
                return next_handler(c)
            except Exception as exc:  # noqa: BLE001 - recovered below
                if _is_http_error(exc):
                    raise
                err = exc

            stack = _capture_stack(err, not config.disable_stack_all, config.stack_size)
            log = config.logger
            if log is not None:
                log.error(
                    "Panic recovered",
                    extra={"error": str(err), "stack": stack, "path": c.request.path or "unknown"},
                )
            if not config.disable_print_stack:
                print(f"[PANIC RECOVER] {err}\n{stack}")

            error: dict[str, Any] = {"code": "PANIC", "message": "Internal server error"}
            if log is not None and log.isEnabledFor(logging.DEBUG):
                error["details"] = {"panic": str(err), "stack": _format_stack(stack)}

            try:
                c.json(int(HTTPStatus.INTERNAL_SERVER_ERROR), {"error": error})
            except Exception as send_exc:  # noqa: BLE001 - nothing more can be sent
                if log is not None:
                    log.error("Failed to send panic response", extra={"error": str(send_exc)})
            return None

        return handler

    return middleware