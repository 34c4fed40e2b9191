"""Cross-origin resource sharing middleware."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from typing import Any

from ..web import Context

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]

_DEFAULT_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]


@dataclass
class CORSConfig:
    """CORS settings; ``max_age`` is in seconds and 0 leaves it unset."""

    allow_origins: list[str] = field(default_factory=list)
    allow_methods: list[str] = field(default_factory=list)
    allow_headers: list[str] = field(default_factory=list)
    expose_headers: list[str] = field(default_factory=list)
    allow_credentials: bool = False
    max_age: int = 0


def default_cors_config() -> CORSConfig:
    return CORSConfig(
        allow_origins=["*"],
        allow_methods=list(_DEFAULT_METHODS),
        allow_headers=["*"],
    )


def cors() -> Middleware:
    """CORS middleware with the default, permissive settings."""
    return cors_with_config(default_cors_config())


def cors_with_config(config: CORSConfig | None) -> Middleware:
    """CORS middleware; answers preflight OPTIONS requests itself with 204."""
    config = replace(config) if config is not None else default_cors_config()
    if not config.allow_origins:
        config.allow_origins = ["*"]
    if not config.allow_methods:
        config.allow_methods = list(_DEFAULT_METHODS)
    allow_methods = ", ".join(config.allow_methods)

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            request = c.request
            headers = c.response.headers
            origin = request.headers.get("Origin") or ""
            allow_origin = next(
                (o for o in config.allow_origins if o == "*" or o == origin), ""
            )

            if request.method != "OPTIONS":
                if allow_origin:
                    headers["Access-Control-Allow-Origin"] = allow_origin
                if config.allow_credentials:
                    headers["Access-Control-Allow-Credentials"] = "true"
                if config.expose_headers:
                    headers["Access-Control-Expose-Headers"] = ", ".join(config.expose_headers)
                return next_handler(c)

            headers.add("Vary", "Origin")
            headers.add("Vary", "Access-Control-Request-Method")
            headers.add("Vary", "Access-Control-Request-Headers")

            if not allow_origin:
                c.response.write_header(HTTPStatus.NO_CONTENT)
                return None

            headers["Access-Control-Allow-Origin"] = allow_origin
            headers["Access-Control-Allow-Methods"] = allow_methods
            if config.allow_credentials:
                headers["Access-Control-Allow-Credentials"] = "true"
            if config.allow_headers:
                allow_headers = ", ".join(config.allow_headers)
                if config.allow_headers[0] == "*":
                    requested = request.headers.get("Access-Control-Request-Headers") or ""
                    if requested:
                        allow_headers = requested
                headers["Access-Control-Allow-Headers"] = allow_headers
            if config.max_age > 0:
                headers["Access-Control-Max-Age"] = str(config.max_age)

            c.response.write_header(HTTPStatus.NO_CONTENT)
            return None

        return handler

    return middleware