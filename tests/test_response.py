import json
from datetime import datetime, timedelta, timezone

import pytest

from gortex.errors.codes import ErrorCode
from gortex.errors.response import (
    ErrorResponse,
    get_request_id,
    new,
    new_from_code,
    new_with_details,
)
from gortex.requestid import HEADER_X_REQUEST_ID
from gortex.web import Context, Headers, Request


def test_new_error_response():
    err = new(ErrorCode.VALIDATION_FAILED, "Custom validation error")
    assert err.success is False
    assert err.detail.code == 1000
    assert err.detail.message == "Custom validation error"
    assert err.timestamp.year >= 2024


def test_new_with_details():
    err = new_with_details(
        ErrorCode.INVALID_INPUT,
        "Invalid user input",
        {"field": "email", "error": "invalid format"},
    )
    assert err.detail.details["field"] == "email"


def test_new_from_code():
    err = new_from_code(ErrorCode.UNAUTHORIZED)
    assert err.detail.code == int(ErrorCode.UNAUTHORIZED)
    assert err.detail.message == ErrorCode.UNAUTHORIZED.message


def test_chaining():
    err = (
        new(ErrorCode.BUSINESS_LOGIC_ERROR, "Business error")
        .with_request_id("req-123")
        .with_meta({"version": "1.0"})
        .with_detail("resource", "user")
        .with_detail("id", 123)
    )
    assert err.request_id == "req-123"
    assert err.meta["version"] == "1.0"
    assert err.detail.details["resource"] == "user"
    assert err.detail.details["id"] == 123


def test_send():
    ctx = Context()
    err = new(ErrorCode.VALIDATION_FAILED, "Test error").with_request_id("test-123")
    err.send(ctx, 400)
    assert ctx.response.status == 400
    body = json.loads(ctx.response.text())
    assert body["request_id"] == "test-123"
    assert body["error"]["code"] == 1000
    assert body["error"]["message"] == "Test error"
    assert body["success"] is False


def test_send_fills_request_id_from_context():
    ctx = Context()
    ctx.set("request_id", "ctx-123")
    err = new(ErrorCode.VALIDATION_FAILED, "Test error")
    err.send(ctx, 400)
    assert err.request_id == "ctx-123"
    assert json.loads(ctx.response.text())["request_id"] == "ctx-123"


def test_get_request_id_from_response_header():
    ctx = Context()
    ctx.response.headers[HEADER_X_REQUEST_ID] = "resp-123"
    assert get_request_id(ctx) == "resp-123"


def test_get_request_id_from_request_header():
    ctx = Context(request=Request(headers=Headers({HEADER_X_REQUEST_ID: "req-123"})))
    assert get_request_id(ctx) == "req-123"


def test_get_request_id_none():
    assert get_request_id(Context()) == ""


def test_error_interface():
    err = new(ErrorCode.INTERNAL_SERVER_ERROR, "Server error")
    assert str(err) == "Server error"
    with pytest.raises(ErrorResponse) as info:
        raise err
    assert info.value is err


def test_with_details_replaces():
    err = new(ErrorCode.VALIDATION_FAILED, "Validation error").with_details(
        {"field1": "value1", "field2": 123}
    )
    assert len(err.detail.details) == 2
    assert err.detail.details["field1"] == "value1"


def test_to_dict_omits_empty_fields():
    body = new(ErrorCode.VALIDATION_FAILED, "Test error").to_dict()
    assert "details" not in body["error"]
    assert "request_id" not in body
    assert "meta" not in body
    assert body["timestamp"].endswith("Z")


def test_timestamp_is_recent_utc():
    err = new(ErrorCode.VALIDATION_FAILED, "Test error")
    assert err.timestamp.tzinfo == timezone.utc
    assert datetime.now(timezone.utc) - err.timestamp < timedelta(seconds=1)