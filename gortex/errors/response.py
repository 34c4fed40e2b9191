"""Standardised error response body and helpers to build and send it."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..requestid import from_web_context
from ..web import Context
from .codes import message_for


@dataclass
class ErrorDetail:
    code: int
    message: str
    details: dict[str, Any] | None = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(eq=False)
class ErrorResponse(Exception):
    """An error that can be raised and also serialised as the response body."""

    detail: ErrorDetail
    success: bool = False
    timestamp: datetime = field(default_factory=_utc_now)
    request_id: str = ""
    meta: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        super().__init__(self.detail.message)

    def __str__(self) -> str:
        return self.detail.message

    def with_request_id(self, request_id: str) -> ErrorResponse:
        self.request_id = request_id
        return self

    def with_meta(self, meta: dict[str, Any]) -> ErrorResponse:
        self.meta = meta
        return self

    def with_detail(self, key: str, value: Any) -> ErrorResponse:
        if self.detail.details is None:
            self.detail.details = {}
        self.detail.details[key] = value
        return self

    def with_details(self, details: dict[str, Any] | None) -> ErrorResponse:
        self.detail.details = details
        return self

    def send(self, c: Context, http_status: int) -> None:
        """Write the response as JSON, filling in the request ID if it is unset."""
        if not self.request_id:
            self.request_id = get_request_id(c)
        c.json(http_status, self)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.detail.code, "message": self.detail.message}
        if self.detail.details:
            error["details"] = self.detail.details
        body: dict[str, Any] = {
            "success": self.success,
            "error": error,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }
        if self.request_id:
            body["request_id"] = self.request_id
        if self.meta:
            body["meta"] = self.meta
        return body


def get_request_id(c: Context) -> str:
    """Return the request ID of a context, or an empty string."""
    return from_web_context(c)


def new(code: int, message: str) -> ErrorResponse:
    return ErrorResponse(ErrorDetail(code=int(code), message=message))


def new_with_details(code: int, message: str, details: dict[str, Any] | None) -> ErrorResponse:
    return ErrorResponse(ErrorDetail(code=int(code), message=message, details=details))


def new_from_code(code: int) -> ErrorResponse:
    """Build an error response that carries the code's default message."""
    return new(code, message_for(code))