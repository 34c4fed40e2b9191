# gortex

Reusable pieces for HTTP services in Python:

- **`gortex.web`** – a small in-memory request/response model: `Headers`
  (case-insensitive, multi-valued), `Request`, `Response` and the per-request
  `Context` that handlers and middleware receive.
- **`gortex.errors`** – numeric error codes grouped by category
  (1xxx validation, 2xxx authentication/authorisation, 3xxx system,
  4xxx business logic), a standard JSON error response, helpers that send
  common error responses, and a registry that maps your own exceptions to
  HTTP statuses.
- **`gortex.middleware`** – middleware for error handling, recovery from
  unexpected exceptions, request logging, request IDs, CORS, and token or
  session authentication.
- **`gortex.requestid`** – reading, storing and forwarding the `X-Request-ID`
  header, including an `HTTPClient` that adds it to outgoing requests.
- **`gortex.httpclient`** – a `requests`-based client with request and
  status-code metrics, and a named pool of such clients.
- **`gortex.pool`** – reusable buffers, size-classed byte slices and object
  pools, each with usage counters.

## Installation

```
pip install gortex
```

To run the test suite, install the test extra and run pytest:

```
pip install gortex[test]
pytest
```

## Contexts

A handler is any callable taking a `gortex.web.Context`. The context holds a
`Request` (method, path, headers, body, remote address and a `values` mapping),
a `Response` (status, headers, body) and a dictionary of per-request values
read with `c.get(key)` and written with `c.set(key, value)`. `c.json(status, data)`
and `c.string(status, text)` write the response body; objects with a `to_dict`
method are serialised through it.

```python
from gortex.web import Context, Headers, Request

c = Context(request=Request(method="GET", path="/users", headers=Headers({"X-Request-ID": "abc"})))
c.json(200, {"ok": True})
print(c.response.status, c.response.text())
```

## Error responses

`ErrorResponse` is both an exception and a response body. Its `to_dict()`,
which is what `send` writes, has this shape:

```json
{
  "success": false,
  "error": {"code": 4001, "message": "User not found", "details": {"resource": "User"}},
  "timestamp": "...",
  "request_id": "..."
}
```

`details`, `request_id` and `meta` are left out when empty.

```python
from gortex.errors.codes import ErrorCode
from gortex.errors.response import new
from gortex.errors.helpers import get_http_status

resp = new(ErrorCode.INSUFFICIENT_BALANCE, "Insufficient balance for transfer")
resp.with_detail("current_balance", 10).with_detail("requested_amount", 25)
status = get_http_status(ErrorCode.INSUFFICIENT_BALANCE)  # 402
body = resp.to_dict()
```

`ErrorResponse.send(c, http_status)` writes the response through a context,
filling in the request ID from the context value, the response header or the
request header when it is not set. Shorthands such as `validation_error`,
`validation_field_error`, `unauthorized_error`, `forbidden_error`,
`not_found_error`, `internal_server_error`, `rate_limit_error` (which also sets
`Retry-After`), `conflict_error`, `timeout_error`, `database_error`,
`send_error`, `send_error_code` and `bad_request` live in
`gortex.errors.helpers`. Unknown codes have the message `"Unknown error"` and
map to status 500.

### Mapping your own exceptions

```python
from gortex.errors.codes import ErrorCode
from gortex.errors.registry import register, handle_business_error

class UserNotFound(Exception):
    pass

USER_NOT_FOUND = UserNotFound("user not found")
register(USER_NOT_FOUND, ErrorCode.RESOURCE_NOT_FOUND, 404, "User not found")

status, resp = handle_business_error(USER_NOT_FOUND)
# status == 404, resp.to_dict()["error"]["details"]["error"] == "user not found"
```

Lookups try the exact exception instance first, then a registration by
qualified type name (`register_type`, with names as given by
`error_type_name`), then follow the exception's `__cause__` (or its implicit
`__context__`). `handle_business_error` returns `(200, None)` for `None`,
passes an `ErrorResponse` through with the status of its code, and turns
anything unregistered into a 500 response with the message
`"An error occurred"`. `ErrorRegistry` gives the same behaviour as a separate
instance.

## Middleware

Each middleware takes the next handler and returns a new handler. Plain
constructors use defaults, and `*_with_config` variants take a config object:

| Middleware | Module | Plain | Configurable |
| --- | --- | --- | --- |
| Error handling | `error_handler` | `error_handler()` | `error_handler_with_config(ErrorHandlerConfig(...))` |
| Recovery | `recovery` | `recovery()` | `recovery_with_config(RecoveryConfig(...))` |
| Logging | `logger` | `logger_middleware(logger)` | `logger_with_config(LoggerConfig(...))` |
| Request ID | `request_id` | `request_id()` | `request_id_with_config(RequestIDConfig(...))` |
| CORS | `cors` | `cors()` | `cors_with_config(CORSConfig(...))` |
| Token auth | `auth` | `jwt_auth(token_validator)` | `jwt_auth_with_config(AuthConfig(...))` |
| Session auth | `auth` | `session_auth(store)` | `session_auth_with_config(SessionConfig(...))` |

- The error handler catches exceptions from the handler and writes
  `{"error": {"code": ..., "message": ..., "details": ...}, "request_id": ...}`.
  `ErrorResponse` gives the code `ERR_<code>` and uses its code as the status;
  exceptions with an integer `status_code` give `HTTP_<status>`; anything else
  gives `INTERNAL_ERROR` with status 500 and, by default, a generic message.
- Recovery turns other unexpected exceptions into a 500 response with the code
  `PANIC`; `ErrorResponse` and exceptions with a `status_code` pass through.
- The logger middleware logs method, path, status, latency, client IP and user
  agent through a standard `logging` logger, at error, warning or info level
  by status. `/health` and `/metrics` are skipped by default.
- The request ID middleware reuses the incoming `X-Request-ID` header or
  generates a UUID, stores it under `request_id`, and echoes it in the response.
- Token and session authentication raise `ErrorResponse` on failure, so put
  them inside the error handler.

```python
from gortex.middleware.cors import cors_with_config, CORSConfig

allow_example = cors_with_config(CORSConfig(
    allow_origins=["https://example.com"],
    allow_methods=["GET", "POST"],
    allow_credentials=True,
    max_age=3600,
))
handler = allow_example(my_handler)
```

### Authentication

`jwt_auth` takes a token validator: a callable that receives the value after
`Bearer ` and returns `Claims` (`user_id`, `username`, `email`, `role`,
`game_id`), raising any exception when the token is not acceptable. The claims
are stored under `jwt-claims`. `require_role` and `require_game_id` check them;
`get_claims`, `get_user_id`, `get_username` and `get_claims_from_context` read
them back.

`session_auth` takes any object with `validate(session_id) -> bool` and
`get(session_id) -> dict` (the `SessionStore` protocol). The session ID is read
from the `session_id` cookie or header, and the session data is stored under
`session`.

## Request IDs

`gortex.requestid` reads the ID from a context (`from_web_context`), keeps it
in plain value mappings (`with_context`, `from_context`, `with_web_context`),
sets and reads the header on outgoing requests (`set_header`, `get_header`,
`propagate_to_request`, `propagate_from_context`), and tags loggers with it
(`logger`, `logger_from_web_context`, `logger_from_context`). `HTTPClient(ctx)`
sends `requests` requests through a session with the ID attached; it has `do`,
`get` and `post`.

## HTTP clients

```python
import requests
from gortex.httpclient.client import new_default
from gortex.httpclient.pool import ClientPool

client = new_default()
response = client.do(requests.Request("GET", "http://localhost:8000/"))
print(client.get_metrics().status_codes)

pool = ClientPool()
internal = pool.get("internal")   # 5 s timeout
external = pool.get("external")   # 30 s timeout
metrics = pool.get_metrics("internal")
pool.close()
```

`Client.do` accepts a `requests.Request` or `PreparedRequest`;
`do_with_timeout` overrides the timeout in seconds. The names `internal`,
`external` and `long-poll` get tuned settings; any other name gets the
defaults from `default_config()`. `ClientPool.get_metrics` raises `KeyError`
for an unknown name. Idle-connection counts in the metrics are always 0.

## Pools

```python
from gortex.pool.byteslices import ByteSlicePool

slices = ByteSlicePool()
buf = slices.get(100)     # a memoryview 100 bytes long, backed by the 512-byte size class
slices.put(buf)
print(slices.get_metrics()[512])
```

`BufferPool` (in `gortex.pool.buffer`, handing out `bytearray`s),
`ObjectPool` and `StructPool` (in `gortex.pool.objects`) work the same way:
`get`, `put` and `get_metrics`. Module-level `get_buffer`/`put_buffer` and
`get_bytes`/`put_bytes` use shared default pools.

## What this package does not do

There is no HTTP server or router here: `Context` objects are built by your
own code or tests, and the middleware only wraps handler callables. The
package does not issue or verify JWTs itself; token checking is whatever
validator you pass to `jwt_auth`. There is no session storage either; supply
your own `SessionStore`.