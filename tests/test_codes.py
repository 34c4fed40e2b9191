import pytest

from gortex.errors.codes import ErrorCode, message_for


@pytest.mark.parametrize(
    "code, expected",
    [
        (ErrorCode.VALIDATION_FAILED, "Validation failed"),
        (ErrorCode.INVALID_INPUT, "Invalid input provided"),
        (ErrorCode.MISSING_REQUIRED_FIELD, "Required field is missing"),
        (ErrorCode.UNAUTHORIZED, "Unauthorized access"),
        (ErrorCode.TOKEN_EXPIRED, "Token has expired"),
        (ErrorCode.FORBIDDEN, "Access forbidden"),
        (ErrorCode.INTERNAL_SERVER_ERROR, "Internal server error"),
        (ErrorCode.DATABASE_ERROR, "Database error occurred"),
        (ErrorCode.RATE_LIMIT_EXCEEDED, "Rate limit exceeded"),
        (ErrorCode.RESOURCE_NOT_FOUND, "Resource not found"),
        (ErrorCode.CONFLICT, "Resource conflict"),
        (ErrorCode.INSUFFICIENT_BALANCE, "Insufficient balance"),
        (9999, "Unknown error"),
    ],
)
def test_message(code, expected):
    assert message_for(code) == expected


def test_message_property_matches_lookup():
    code = ErrorCode(2002)
    assert code.message == "Token has expired"
    assert message_for(int(code)) == "Token has expired"


@pytest.mark.parametrize(
    "code, expected",
    [
        (ErrorCode.VALIDATION_FAILED, 1000),
        (ErrorCode.UNAUTHORIZED, 2000),
        (ErrorCode.INTERNAL_SERVER_ERROR, 3000),
        (ErrorCode.BUSINESS_LOGIC_ERROR, 4000),
    ],
)
def test_int(code, expected):
    assert int(code) == expected


@pytest.mark.parametrize(
    "code, expected",
    [
        (ErrorCode.VALIDATION_FAILED, "Validation failed"),
        (ErrorCode.UNAUTHORIZED, "Unauthorized access"),
    ],
)
def test_str(code, expected):
    assert str(code) == expected


def test_unknown_code_is_not_an_enum_member():
    with pytest.raises(ValueError):
        ErrorCode(9999)


@pytest.mark.parametrize(
    "code, low, high",
    [
        (ErrorCode.VALIDATION_FAILED, 1000, 1999),
        (ErrorCode.UNAUTHORIZED, 2000, 2999),
        (ErrorCode.INTERNAL_SERVER_ERROR, 3000, 3999),
        (ErrorCode.BUSINESS_LOGIC_ERROR, 4000, 4999),
    ],
)
def test_categories(code, low, high):
    assert low <= int(code) <= high


def test_every_code_has_a_message():
    messages = [message_for(code) for code in ErrorCode]
    assert len(messages) == 40
    assert "Unknown error" not in messages