"""Middleware that logs each request with its status and latency."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from ..web import Context, Request

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]

DEFAULT_BODY_LOG_LIMIT = 1024


@dataclass
class LoggerConfig:
    """Settings of the request logger; bodies are truncated to ``body_log_limit`` bytes."""

    logger: logging.Logger | logging.LoggerAdapter | None = None
    skip_paths: list[str] = field(default_factory=list)
    log_request_body: bool = False
    log_response_body: bool = False
    body_log_limit: int = DEFAULT_BODY_LOG_LIMIT


def default_logger_config(logger: logging.Logger | logging.LoggerAdapter) -> LoggerConfig:
    return LoggerConfig(logger=logger, skip_paths=["/health", "/metrics"])


def logger_middleware(logger: logging.Logger | logging.LoggerAdapter) -> Middleware:
    """Request logger with the default settings."""
    return logger_with_config(default_logger_config(logger))


def _client_ip(request: Request) -> str:
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",", 1)[0]
    return request.remote_addr


def logger_with_config(config: LoggerConfig | None) -> Middleware:
    """Request logger with custom settings; raises ValueError without a logger."""
    if config is None:
        raise ValueError("LoggerConfig cannot be None")
    if config.logger is None:
        raise ValueError("Logger cannot be None")
    config = replace(config, skip_paths=list(config.skip_paths))
    if config.body_log_limit == 0:
        config.body_log_limit = DEFAULT_BODY_LOG_LIMIT
    log = config.logger
    limit = config.body_log_limit

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            request = c.request
            if request.path in config.skip_paths:
                return next_handler(c)

            start = time.perf_counter()
            value = c.get("request_id")
            request_id = value if isinstance(value, str) else ""

            request_body = b""
            if config.log_request_body and request.body:
                request_body = bytes(request.body[:limit])

            error: Exception | None = None
            result: Any = None
            try:
                result = next_handler(c)
            except Exception as exc:  # noqa: BLE001 - logged, then raised again
                error = exc

            latency = time.perf_counter() - start
            status = c.response.status
            fields: dict[str, Any] = {
                "method": request.method,
                "path": request.path,
                "status": status,
                "latency": latency,
                "ip": _client_ip(request),
                "user_agent": request.headers.get("User-Agent") or "",
            }
            if request_id:
                fields["request_id"] = request_id
            if config.log_request_body and request_body:
                fields["request_body"] = request_body
            response_body = bytes(c.response.body[:limit])
            if config.log_response_body and response_body:
                fields["response_body"] = response_body
            if error is not None:
                fields["error"] = str(error)

            if error is not None or status >= 500:
                log.error("Request failed", extra=fields)
            elif status >= 400:
                log.warning("Request error", extra=fields)
            else:
                log.info("Request completed", extra=fields)

            if error is not None:
                raise error
            return result

        return handler

    return middleware