"""Middleware that gives every request an ID and echoes it in the response."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from ..requestid import HEADER_X_REQUEST_ID, REQUEST_ID_KEY
from ..web import Context

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]


def _new_uuid() -> str:
    return str(uuid.uuid4())


@dataclass
class RequestIDConfig:
    """Header to read and write the ID, how to generate one, and paths to leave alone."""

    header: str = HEADER_X_REQUEST_ID
    generator: Callable[[], str] | None = _new_uuid
    skip_paths: list[str] = field(default_factory=list)


def request_id() -> Middleware:
    """Request ID middleware with the default settings."""
    return request_id_with_config(RequestIDConfig())


def request_id_with_config(config: RequestIDConfig | None) -> Middleware:
    """Request ID middleware with custom settings."""
    config = replace(config) if config is not None else RequestIDConfig()
    config.skip_paths = list(config.skip_paths)
    if not config.header:
        config.header = HEADER_X_REQUEST_ID
    if config.generator is None:
        config.generator = _new_uuid
    header = config.header
    generate = config.generator

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            request = c.request
            if request.path in config.skip_paths:
                return next_handler(c)

            rid = request.headers.get(header) or ""
            if not rid:
                rid = generate()
                request.headers[header] = rid

            c.set_request(request.with_values({REQUEST_ID_KEY: rid}))
            c.set(REQUEST_ID_KEY, rid)
            c.response.headers[header] = rid
            return next_handler(c)

        return handler

    return middleware