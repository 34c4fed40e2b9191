import json
import logging
import uuid

import pytest

from gortex.middleware.logger import LoggerConfig, logger_middleware, logger_with_config
from gortex.web import Context, Headers, Request


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def captured():
    log = logging.getLogger(f"test.logger.{uuid.uuid4().hex}")
    log.setLevel(logging.DEBUG)
    log.propagate = False
    sink = _ListHandler()
    log.addHandler(sink)
    return log, sink


def _ctx(method="GET", path="/test", headers=None, body=b"", remote_addr="192.0.2.1:1234"):
    request = Request(method=method, path=path, headers=Headers(headers or {}), body=body, remote_addr=remote_addr)
    return Context(request=request)


def _full_config(log):
    return LoggerConfig(
        logger=log,
        skip_paths=["/health"],
        log_request_body=True,
        log_response_body=True,
        body_log_limit=100,
    )


def test_logs_request(captured):
    log, sink = captured
    mw = logger_with_config(_full_config(log))
    c = _ctx("POST", "/test", {"Content-Type": "application/json"}, b'{"test": "data"}')
    c.set("request_id", "test-123")
    mw(lambda ctx: ctx.json(200, {"status": "ok"}))(c)

    assert c.response.status == 200
    assert json.loads(c.response.text()) == {"status": "ok"}
    assert len(sink.records) == 1
    record = sink.records[0]
    assert record.levelno == logging.INFO
    assert record.getMessage() == "Request completed"
    assert record.method == "POST"
    assert record.path == "/test"
    assert record.status == 200
    assert record.request_id == "test-123"
    assert record.request_body == b'{"test": "data"}'
    assert record.response_body == b'{"status": "ok"}\n'
    assert record.latency >= 0


def test_skips_configured_paths(captured):
    log, sink = captured
    mw = logger_with_config(_full_config(log))
    c = _ctx(path="/health")
    mw(lambda ctx: ctx.string(200, "OK"))(c)
    assert sink.records == []
    assert c.response.text() == "OK"


def test_default_middleware_skips_metrics(captured):
    log, sink = captured
    mw = logger_middleware(log)
    skipped = _ctx(path="/metrics")
    logged = _ctx(path="/api")
    mw(lambda ctx: ctx.string(200, "OK"))(skipped)
    mw(lambda ctx: ctx.string(200, "OK"))(logged)
    assert skipped.response.text() == "OK"
    assert logged.response.text() == "OK"
    assert [r.path for r in sink.records] == ["/api"]


def test_client_error_is_warning(captured):
    log, sink = captured
    mw = logger_middleware(log)
    c = _ctx()
    mw(lambda ctx: ctx.string(404, "missing"))(c)
    assert c.response.status == 404
    assert sink.records[0].levelno == logging.WARNING
    assert sink.records[0].getMessage() == "Request error"


def test_server_error_is_error(captured):
    log, sink = captured
    mw = logger_middleware(log)
    c = _ctx()
    mw(lambda ctx: ctx.string(503, "down"))(c)
    assert c.response.status == 503
    assert sink.records[0].levelno == logging.ERROR
    assert sink.records[0].getMessage() == "Request failed"


def test_exception_is_logged_and_raised(captured):
    log, sink = captured
    mw = logger_middleware(log)

    def failing(ctx):
        raise RuntimeError("kaboom")

    with pytest.raises(RuntimeError, match="kaboom"):
        mw(failing)(_ctx())
    assert sink.records[0].levelno == logging.ERROR
    assert sink.records[0].error == "kaboom"


def test_body_limit(captured):
    log, sink = captured
    config = LoggerConfig(logger=log, log_request_body=True, log_response_body=True, body_log_limit=5)
    mw = logger_with_config(config)
    c = _ctx(body=b"0123456789")
    mw(lambda ctx: ctx.string(200, "abcdefghij"))(c)
    assert c.response.text() == "abcdefghij"
    record = sink.records[0]
    assert record.request_body == b"01234"
    assert record.response_body == b"abcde"


def test_bodies_not_logged_by_default(captured):
    log, sink = captured
    mw = logger_middleware(log)
    c = _ctx(body=b"payload")
    mw(lambda ctx: ctx.string(200, "hello"))(c)
    assert c.response.text() == "hello"
    record = sink.records[0]
    assert not hasattr(record, "request_body")
    assert not hasattr(record, "response_body")


@pytest.mark.parametrize(
    "headers, expected",
    [
        ({"X-Real-IP": "203.0.113.5", "X-Forwarded-For": "198.51.100.1"}, "203.0.113.5"),
        ({"X-Forwarded-For": "198.51.100.1, 198.51.100.2"}, "198.51.100.1"),
        ({"X-Forwarded-For": "198.51.100.9"}, "198.51.100.9"),
        ({}, "192.0.2.1:1234"),
    ],
)
def test_client_ip(captured, headers, expected):
    log, sink = captured
    c = _ctx(headers=headers)
    logger_middleware(log)(lambda ctx: ctx.string(200, "OK"))(c)
    assert c.response.text() == "OK"
    assert sink.records[0].ip == expected


def test_user_agent_logged(captured):
    log, sink = captured
    c = _ctx(headers={"User-Agent": "probe/1.0"})
    logger_middleware(log)(lambda ctx: ctx.string(200, "OK"))(c)
    assert c.response.text() == "OK"
    assert sink.records[0].user_agent == "probe/1.0"


def test_config_required():
    with pytest.raises(ValueError):
        logger_with_config(None)


def test_logger_required():
    with pytest.raises(ValueError):
        logger_with_config(LoggerConfig(logger=None))