import uuid

from gortex.middleware.request_id import RequestIDConfig, request_id, request_id_with_config
from gortex.web import Context, Headers, Request


def _ctx(path="/test", headers=None):
    return Context(request=Request(method="GET", path=path, headers=Headers(headers or {})))


def _capture(store):
    def handler(ctx):
        store["id"] = ctx.get("request_id")
        store["values"] = dict(ctx.request.values)
        ctx.string(200, "OK")

    return handler


def test_generates_new_id():
    c = _ctx()
    seen = {}
    request_id()(_capture(seen))(c)
    captured = seen["id"]
    assert str(uuid.UUID(captured)) == captured
    assert c.response.headers.get("X-Request-ID") == captured
    assert c.request.headers.get("X-Request-ID") == captured
    assert seen["values"]["request_id"] == captured


def test_preserves_existing_id():
    c = _ctx(headers={"X-Request-ID": "test-request-id"})
    seen = {}
    request_id()(_capture(seen))(c)
    assert seen["id"] == "test-request-id"
    assert c.response.headers.get("X-Request-ID") == "test-request-id"


def test_ids_differ_between_requests():
    first, second = {}, {}
    request_id()(_capture(first))(_ctx())
    request_id()(_capture(second))(_ctx())
    assert first["id"] != second["id"]


def test_custom_header_and_generator():
    config = RequestIDConfig(header="X-Trace", generator=lambda: "fixed-id")
    c = _ctx()
    seen = {}
    request_id_with_config(config)(_capture(seen))(c)
    assert seen["id"] == "fixed-id"
    assert c.response.headers.get("X-Trace") == "fixed-id"
    assert c.response.headers.get("X-Request-ID") is None


def test_empty_header_and_missing_generator_use_defaults():
    config = RequestIDConfig(header="", generator=None)
    c = _ctx()
    seen = {}
    request_id_with_config(config)(_capture(seen))(c)
    assert c.response.headers.get("X-Request-ID") == seen["id"]
    assert str(uuid.UUID(seen["id"])) == seen["id"]


def test_skip_paths():
    config = RequestIDConfig(skip_paths=["/health"])
    c = _ctx(path="/health")
    seen = {}
    request_id_with_config(config)(_capture(seen))(c)
    assert seen["id"] is None
    assert c.response.headers.get("X-Request-ID") is None
    assert c.response.text() == "OK"