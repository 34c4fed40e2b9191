"""Helpers for carrying a request ID across contexts, logs and outgoing calls."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from .web import Context

REQUEST_ID_KEY = "request_id"
HEADER_X_REQUEST_ID = "X-Request-ID"


def from_web_context(c: Context) -> str:
    """Return the request ID from a context value, response header or request header."""
    value = c.get(REQUEST_ID_KEY)
    if isinstance(value, str) and value:
        return value
    from_response = c.response.headers.get(HEADER_X_REQUEST_ID)
    if from_response:
        return from_response
    from_request = c.request.headers.get(HEADER_X_REQUEST_ID)
    if from_request:
        return from_request
    return ""


def from_context(ctx: Mapping[str, Any] | None) -> str:
    """Return the request ID stored in a value mapping, or an empty string."""
    if not ctx:
        return ""
    value = ctx.get(REQUEST_ID_KEY)
    return value if isinstance(value, str) else ""


def with_context(ctx: Mapping[str, Any] | None, request_id: str) -> dict[str, Any]:
    """Return a new value mapping that carries ``request_id``."""
    return {**(ctx or {}), REQUEST_ID_KEY: request_id}


def with_web_context(ctx: Mapping[str, Any] | None, c: Context) -> Mapping[str, Any]:
    """Copy the request ID of a web context into a value mapping when it has one."""
    rid = from_web_context(c)
    if rid:
        return with_context(ctx, rid)
    return ctx if ctx is not None else {}


def set_header(request: Any, request_id: str) -> None:
    """Set the request ID header on an outgoing request, ignoring empty IDs."""
    if request_id:
        request.headers[HEADER_X_REQUEST_ID] = request_id


def get_header(request: Any) -> str:
    """Return the request ID header of a request, or an empty string."""
    return request.headers.get(HEADER_X_REQUEST_ID) or ""


def propagate_to_request(c: Context, request: Any) -> None:
    """Copy the request ID of a web context onto an outgoing request."""
    set_header(request, from_web_context(c))


def propagate_from_context(ctx: Mapping[str, Any] | None, request: Any) -> None:
    """Copy the request ID of a value mapping onto an outgoing request."""
    set_header(request, from_context(ctx))


def logger(
    base: logging.Logger | logging.LoggerAdapter, request_id: str
) -> logging.Logger | logging.LoggerAdapter:
    """Return ``base`` tagged with ``request_id``, or ``base`` itself when it is empty."""
    if request_id:
        return logging.LoggerAdapter(base, {"request_id": request_id})
    return base


def logger_from_web_context(base, c: Context):
    return logger(base, from_web_context(c))


def logger_from_context(base, ctx: Mapping[str, Any] | None):
    return logger(base, from_context(ctx))


class HTTPClient:
    """HTTP client that stamps every outgoing request with the context's request ID."""

    def __init__(self, ctx: Mapping[str, Any] | None = None, session: requests.Session | None = None):
        self.ctx: Mapping[str, Any] = ctx or {}
        self.session = session if session is not None else requests.Session()

    def do(self, request: requests.Request) -> requests.Response:
        propagate_from_context(self.ctx, request)
        prepared = self.session.prepare_request(request)
        return self.session.send(prepared)

    def get(self, url: str) -> requests.Response:
        return self.do(requests.Request("GET", url))

    def post(self, url: str, content_type: str, body: Any) -> requests.Response:
        request = requests.Request("POST", url, data=body)
        request.headers["Content-Type"] = content_type
        return self.do(request)