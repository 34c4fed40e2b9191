"""Shortcuts that build an error response and write it to a context."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from ..web import Context
from .codes import ErrorCode, message_for
from .response import new, new_from_code, new_with_details

_CODE_TO_HTTP_STATUS: dict[int, int] = {
    # Validation errors
    ErrorCode.VALIDATION_FAILED: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_INPUT: HTTPStatus.BAD_REQUEST,
    ErrorCode.MISSING_REQUIRED_FIELD: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_FORMAT: HTTPStatus.BAD_REQUEST,
    ErrorCode.VALUE_OUT_OF_RANGE: HTTPStatus.BAD_REQUEST,
    ErrorCode.DUPLICATE_VALUE: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_LENGTH: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_TYPE: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_JSON: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_QUERY_PARAM: HTTPStatus.BAD_REQUEST,
    # Authentication/authorization errors
    ErrorCode.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorCode.INVALID_CREDENTIALS: HTTPStatus.UNAUTHORIZED,
    ErrorCode.TOKEN_EXPIRED: HTTPStatus.UNAUTHORIZED,
    ErrorCode.TOKEN_INVALID: HTTPStatus.UNAUTHORIZED,
    ErrorCode.TOKEN_MISSING: HTTPStatus.UNAUTHORIZED,
    ErrorCode.FORBIDDEN: HTTPStatus.FORBIDDEN,
    ErrorCode.INSUFFICIENT_PERMISSIONS: HTTPStatus.FORBIDDEN,
    ErrorCode.ACCOUNT_LOCKED: HTTPStatus.FORBIDDEN,
    ErrorCode.ACCOUNT_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.SESSION_EXPIRED: HTTPStatus.UNAUTHORIZED,
    # System errors
    ErrorCode.INTERNAL_SERVER_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.DATABASE_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorCode.SERVICE_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.TIMEOUT: HTTPStatus.REQUEST_TIMEOUT,
    ErrorCode.RATE_LIMIT_EXCEEDED: HTTPStatus.TOO_MANY_REQUESTS,
    ErrorCode.RESOURCE_EXHAUSTED: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.NOT_IMPLEMENTED: HTTPStatus.NOT_IMPLEMENTED,
    ErrorCode.BAD_GATEWAY: HTTPStatus.BAD_GATEWAY,
    ErrorCode.CIRCUIT_BREAKER_OPEN: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.CONFIGURATION_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    # Business logic errors
    ErrorCode.BUSINESS_LOGIC_ERROR: HTTPStatus.UNPROCESSABLE_ENTITY,
    ErrorCode.RESOURCE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.RESOURCE_ALREADY_EXISTS: HTTPStatus.CONFLICT,
    ErrorCode.INVALID_OPERATION: HTTPStatus.BAD_REQUEST,
    ErrorCode.PRECONDITION_FAILED: HTTPStatus.PRECONDITION_FAILED,
    ErrorCode.CONFLICT: HTTPStatus.CONFLICT,
    ErrorCode.INSUFFICIENT_BALANCE: HTTPStatus.PAYMENT_REQUIRED,
    ErrorCode.QUOTA_EXCEEDED: HTTPStatus.PAYMENT_REQUIRED,
    ErrorCode.INVALID_STATE: HTTPStatus.CONFLICT,
    ErrorCode.DEPENDENCY_FAILED: HTTPStatus.FAILED_DEPENDENCY,
}


def get_http_status(code: int) -> int:
    """Return the HTTP status for an error code; unknown codes map to 500."""
    return int(_CODE_TO_HTTP_STATUS.get(int(code), HTTPStatus.INTERNAL_SERVER_ERROR))


def validation_error(c: Context, message: str, details: dict[str, Any] | None = None) -> None:
    new_with_details(ErrorCode.VALIDATION_FAILED, message, details).send(c, HTTPStatus.BAD_REQUEST)


def validation_field_error(c: Context, field: str, message: str) -> None:
    details = {"field": field, "error": message}
    err = new_with_details(ErrorCode.INVALID_INPUT, f"Validation failed for field: {field}", details)
    err.send(c, HTTPStatus.BAD_REQUEST)


def unauthorized_error(c: Context, message: str = "") -> None:
    err = new(ErrorCode.UNAUTHORIZED, message or message_for(ErrorCode.UNAUTHORIZED))
    err.send(c, HTTPStatus.UNAUTHORIZED)


def forbidden_error(c: Context, message: str = "") -> None:
    err = new(ErrorCode.FORBIDDEN, message or message_for(ErrorCode.FORBIDDEN))
    err.send(c, HTTPStatus.FORBIDDEN)


def not_found_error(c: Context, resource: str) -> None:
    err = new(ErrorCode.RESOURCE_NOT_FOUND, f"{resource} not found").with_detail("resource", resource)
    err.send(c, HTTPStatus.NOT_FOUND)


def internal_server_error(c: Context, err: BaseException) -> None:
    """Send a generic 500 message, keeping the real error text in the details."""
    response = new_with_details(
        ErrorCode.INTERNAL_SERVER_ERROR, "An internal error occurred", {"error": str(err)}
    )
    response.send(c, HTTPStatus.INTERNAL_SERVER_ERROR)


def rate_limit_error(c: Context, retry_after: int) -> None:
    err = new(ErrorCode.RATE_LIMIT_EXCEEDED, "Rate limit exceeded").with_detail("retry_after", retry_after)
    c.response.headers["Retry-After"] = str(retry_after)
    err.send(c, HTTPStatus.TOO_MANY_REQUESTS)


def conflict_error(c: Context, resource: str, reason: str = "") -> None:
    message = f"Conflict with {resource}"
    if reason:
        message = f"{message}: {reason}"
    err = new(ErrorCode.CONFLICT, message).with_detail("resource", resource).with_detail("reason", reason)
    err.send(c, HTTPStatus.CONFLICT)


def timeout_error(c: Context, operation: str) -> None:
    err = new(ErrorCode.TIMEOUT, f"Operation timed out: {operation}").with_detail("operation", operation)
    err.send(c, HTTPStatus.REQUEST_TIMEOUT)


def database_error(c: Context, operation: str) -> None:
    err = new(ErrorCode.DATABASE_ERROR, f"Database operation failed: {operation}").with_detail(
        "operation", operation
    )
    err.send(c, HTTPStatus.INTERNAL_SERVER_ERROR)


def send_error(
    c: Context, code: int, message: str = "", details: dict[str, Any] | None = None
) -> None:
    """Send any code, falling back to its default message when none is given."""
    err = new_with_details(code, message or message_for(code), details)
    err.send(c, get_http_status(code))


def send_error_code(c: Context, code: int) -> None:
    new_from_code(code).send(c, get_http_status(code))


def bad_request(c: Context, message: str) -> None:
    validation_error(c, message, None)