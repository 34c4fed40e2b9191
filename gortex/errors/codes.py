"""Standard application error codes and their default messages.

Categories: 1xxx validation, 2xxx authentication/authorization,
3xxx system, 4xxx business logic.
"""

from __future__ import annotations

from enum import IntEnum

UNKNOWN_ERROR_MESSAGE = "Unknown error"


class ErrorCode(IntEnum):
    # Validation errors
    VALIDATION_FAILED = 1000
    INVALID_INPUT = 1001
    MISSING_REQUIRED_FIELD = 1002
    INVALID_FORMAT = 1003
    VALUE_OUT_OF_RANGE = 1004
    DUPLICATE_VALUE = 1005
    INVALID_LENGTH = 1006
    INVALID_TYPE = 1007
    INVALID_JSON = 1008
    INVALID_QUERY_PARAM = 1009

    # Authentication/authorization errors
    UNAUTHORIZED = 2000
    INVALID_CREDENTIALS = 2001
    TOKEN_EXPIRED = 2002
    TOKEN_INVALID = 2003
    TOKEN_MISSING = 2004
    FORBIDDEN = 2005
    INSUFFICIENT_PERMISSIONS = 2006
    ACCOUNT_LOCKED = 2007
    ACCOUNT_NOT_FOUND = 2008
    SESSION_EXPIRED = 2009

    # System errors
    INTERNAL_SERVER_ERROR = 3000
    DATABASE_ERROR = 3001
    SERVICE_UNAVAILABLE = 3002
    TIMEOUT = 3003
    RATE_LIMIT_EXCEEDED = 3004
    RESOURCE_EXHAUSTED = 3005
    NOT_IMPLEMENTED = 3006
    BAD_GATEWAY = 3007
    CIRCUIT_BREAKER_OPEN = 3008
    CONFIGURATION_ERROR = 3009

    # Business logic errors
    BUSINESS_LOGIC_ERROR = 4000
    RESOURCE_NOT_FOUND = 4001
    RESOURCE_ALREADY_EXISTS = 4002
    INVALID_OPERATION = 4003
    PRECONDITION_FAILED = 4004
    CONFLICT = 4005
    INSUFFICIENT_BALANCE = 4006
    QUOTA_EXCEEDED = 4007
    INVALID_STATE = 4008
    DEPENDENCY_FAILED = 4009

    @property
    def message(self) -> str:
        """Default message for this code."""
        return message_for(self)

    def __str__(self) -> str:
        return message_for(self)


_MESSAGES: dict[int, str] = {
    ErrorCode.VALIDATION_FAILED: "Validation failed",
    ErrorCode.INVALID_INPUT: "Invalid input provided",
    ErrorCode.MISSING_REQUIRED_FIELD: "Required field is missing",
    ErrorCode.INVALID_FORMAT: "Invalid format",
    ErrorCode.VALUE_OUT_OF_RANGE: "Value is out of acceptable range",
    ErrorCode.DUPLICATE_VALUE: "Duplicate value not allowed",
    ErrorCode.INVALID_LENGTH: "Invalid length",
    ErrorCode.INVALID_TYPE: "Invalid type",
    ErrorCode.INVALID_JSON: "Invalid JSON format",
    ErrorCode.INVALID_QUERY_PARAM: "Invalid query parameter",
    ErrorCode.UNAUTHORIZED: "Unauthorized access",
    ErrorCode.INVALID_CREDENTIALS: "Invalid credentials",
    ErrorCode.TOKEN_EXPIRED: "Token has expired",
    ErrorCode.TOKEN_INVALID: "Invalid token",
    ErrorCode.TOKEN_MISSING: "Token is missing",
    ErrorCode.FORBIDDEN: "Access forbidden",
    ErrorCode.INSUFFICIENT_PERMISSIONS: "Insufficient permissions",
    ErrorCode.ACCOUNT_LOCKED: "Account is locked",
    ErrorCode.ACCOUNT_NOT_FOUND: "Account not found",
    ErrorCode.SESSION_EXPIRED: "Session has expired",
    ErrorCode.INTERNAL_SERVER_ERROR: "Internal server error",
    ErrorCode.DATABASE_ERROR: "Database error occurred",
    ErrorCode.SERVICE_UNAVAILABLE: "Service temporarily unavailable",
    ErrorCode.TIMEOUT: "Request timeout",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate limit exceeded",
    ErrorCode.RESOURCE_EXHAUSTED: "Resource exhausted",
    ErrorCode.NOT_IMPLEMENTED: "Feature not implemented",
    ErrorCode.BAD_GATEWAY: "Bad gateway",
    ErrorCode.CIRCUIT_BREAKER_OPEN: "Circuit breaker is open",
    ErrorCode.CONFIGURATION_ERROR: "Configuration error",
    ErrorCode.BUSINESS_LOGIC_ERROR: "Business logic error",
    ErrorCode.RESOURCE_NOT_FOUND: "Resource not found",
    ErrorCode.RESOURCE_ALREADY_EXISTS: "Resource already exists",
    ErrorCode.INVALID_OPERATION: "Invalid operation",
    ErrorCode.PRECONDITION_FAILED: "Precondition failed",
    ErrorCode.CONFLICT: "Resource conflict",
    ErrorCode.INSUFFICIENT_BALANCE: "Insufficient balance",
    ErrorCode.QUOTA_EXCEEDED: "Quota exceeded",
    ErrorCode.INVALID_STATE: "Invalid state",
    ErrorCode.DEPENDENCY_FAILED: "Dependency failed",
}


def message_for(code: int) -> str:
    """Return the default message for a code; unknown codes give "Unknown error"."""
    return _MESSAGES.get(int(code), UNKNOWN_ERROR_MESSAGE)