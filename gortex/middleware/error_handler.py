"""Middleware that turns exceptions raised by handlers into JSON error responses."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from http import HTTPStatus
from typing import Any

from ..errors.response import ErrorResponse
from ..web import Context

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]

DEFAULT_MESSAGE = "An internal error occurred"


@dataclass
class ErrorHandlerConfig:
    """Settings of the error handler.

    When ``hide_internal_server_error_details`` is set, unexpected exceptions
    are reported with ``default_message`` and details of 5xx errors are dropped.
    """

    logger: logging.Logger | logging.LoggerAdapter | None = None
    hide_internal_server_error_details: bool = True
    default_message: str = DEFAULT_MESSAGE


def error_handler() -> Middleware:
    """Error handler with the default settings."""
    return error_handler_with_config(ErrorHandlerConfig())


def _status_code_of(exc: BaseException) -> int | None:
    status = getattr(exc, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None


def error_handler_with_config(config: ErrorHandlerConfig | None) -> Middleware:
    """Error handler with custom settings."""
    config = replace(config) if config is not None else ErrorHandlerConfig()
    if not config.default_message:
        config.default_message = DEFAULT_MESSAGE

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            try:
                return next_handler(c)
            except Exception as exc:  # noqa: BLE001 - every failure becomes a response
                err = exc

            value = c.get("request_id")
            request_id = value if isinstance(value, str) else ""

            details: dict[str, Any] | None = None
            status = _status_code_of(err)
            if isinstance(err, ErrorResponse):
                code = err.detail.code
                err_code = f"ERR_{code}"
                message = err.detail.message
                if err.detail.details is not None:
                    details = dict(err.detail.details)
            elif status is not None:
                code = status
                err_code = f"HTTP_{code}"
                message = str(err)
            else:
                code = int(HTTPStatus.INTERNAL_SERVER_ERROR)
                err_code = "INTERNAL_ERROR"
                message = str(err)
                if config.hide_internal_server_error_details:
                    message = config.default_message
                if config.logger is not None:
                    config.logger.error(
                        "Internal server error",
                        exc_info=err,
                        extra={
                            "error": str(err),
                            "request_id": request_id,
                            "path": c.request.path or "unknown",
                        },
                    )

            _write_error_response(c, code, err_code, message, details, request_id, config)
            return None

        return handler

    return middleware


def _write_error_response(
    c: Context,
    status: int,
    err_code: str,
    message: str,
    details: dict[str, Any] | None,
    request_id: str,
    config: ErrorHandlerConfig,
) -> None:
    error: dict[str, Any] = {"code": err_code, "message": message}
    body: dict[str, Any] = {"error": error}
    if request_id:
        body["request_id"] = request_id
    if details is not None and (not config.hide_internal_server_error_details or status < 500):
        error["details"] = details
    c.json(status, body)