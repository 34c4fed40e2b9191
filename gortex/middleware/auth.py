"""Token and session authentication middleware."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Protocol, runtime_checkable

from ..errors.codes import ErrorCode
from ..errors.response import ErrorResponse, new_with_details
from ..web import Context

Handler = Callable[[Context], Any]
Middleware = Callable[[Handler], Handler]
TokenValidator = Callable[[str], "Claims"]

DEFAULT_CLAIMS_KEY = "jwt-claims"
DEFAULT_SESSION_KEY = "session_id"


@dataclass
class Claims:
    """Identity carried by a validated token."""

    user_id: str = ""
    username: str = ""
    email: str = ""
    role: str = ""
    game_id: str = ""


@dataclass
class AuthConfig:
    """Settings of the token middleware.

    ``token_validator`` takes the bearer value and returns its Claims,
    raising an exception when the value is not acceptable.
    """

    token_validator: TokenValidator | None = None
    skip_paths: list[str] = field(default_factory=list)
    claims_context_key: str = DEFAULT_CLAIMS_KEY


@runtime_checkable
class SessionStore(Protocol):
    """Storage that validates session IDs and returns their data."""

    def get(self, session_id: str) -> dict[str, Any]:
        """Return the data of a session; raise when it cannot be read."""
        ...

    def validate(self, session_id: str) -> bool:
        """Return whether a session is valid; raise when it cannot be checked."""
        ...


@dataclass
class SessionConfig:
    session_store: SessionStore | None = None
    session_key: str = DEFAULT_SESSION_KEY
    skip_paths: list[str] = field(default_factory=list)


def _error(code: ErrorCode, message: str, details: dict[str, Any] | None = None) -> ErrorResponse:
    return new_with_details(code, message, details)


def _key(claims_key: str) -> str:
    return claims_key or DEFAULT_CLAIMS_KEY


def _skipped(path: str, skip_paths: list[str]) -> bool:
    return any(path.startswith(skip) for skip in skip_paths)


def default_auth_config(token_validator: TokenValidator) -> AuthConfig:
    return AuthConfig(token_validator=token_validator)


def jwt_auth(token_validator: TokenValidator) -> Middleware:
    """Require a valid ``Authorization: Bearer`` header on every request."""
    return jwt_auth_with_config(default_auth_config(token_validator))


def jwt_auth_with_config(config: AuthConfig | None) -> Middleware:
    """Token middleware with custom settings; raises ValueError on a bad config."""
    if config is None:
        raise ValueError("auth middleware: config is required")
    if config.token_validator is None:
        raise ValueError("auth middleware: token validator is required")
    config = replace(
        config,
        skip_paths=list(config.skip_paths),
        claims_context_key=config.claims_context_key or DEFAULT_CLAIMS_KEY,
    )
    validate = config.token_validator

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            request = c.request
            if _skipped(request.path, config.skip_paths):
                return next_handler(c)

            auth_header = request.headers.get("Authorization") or ""
            if not auth_header:
                raise _error(ErrorCode.UNAUTHORIZED, "missing authorization header")

            parts = auth_header.split(" ")
            if len(parts) != 2 or parts[0] != "Bearer":
                raise _error(ErrorCode.UNAUTHORIZED, "invalid authorization header format")

            try:
                claims = validate(parts[1])
            except Exception as exc:
                raise _error(
                    ErrorCode.UNAUTHORIZED, "invalid or expired token", {"error": str(exc)}
                ) from exc

            c.set(config.claims_context_key, claims)
            c.set_request(request.with_values({config.claims_context_key: claims}))
            return next_handler(c)

        return handler

    return middleware


def _claims_guard(claims_key: str, check: Callable[[Claims], None]) -> Middleware:
    key = _key(claims_key)

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            value = c.get(key)
            if value is None:
                raise _error(ErrorCode.UNAUTHORIZED, "unauthorized")
            if not isinstance(value, Claims):
                raise _error(ErrorCode.UNAUTHORIZED, "invalid claims type")
            check(value)
            return next_handler(c)

        return handler

    return middleware


def require_role(required_role: str, claims_key: str = "") -> Middleware:
    """Let through only requests whose claims carry ``required_role``."""

    def check(claims: Claims) -> None:
        if claims.role != required_role:
            raise _error(
                ErrorCode.FORBIDDEN,
                "insufficient permissions",
                {"required_role": required_role, "user_role": claims.role},
            )

    return _claims_guard(claims_key, check)


def require_game_id(claims_key: str = "") -> Middleware:
    """Let through only requests whose claims carry a game ID."""

    def check(claims: Claims) -> None:
        if not claims.game_id:
            raise _error(ErrorCode.FORBIDDEN, "game-specific token required")

    return _claims_guard(claims_key, check)


def get_claims(c: Context, claims_key: str = "") -> Claims | None:
    value = c.get(_key(claims_key))
    return value if isinstance(value, Claims) else None


def get_claims_from_context(ctx: Mapping[str, Any] | None, claims_key: str = "") -> Claims | None:
    """Return the claims stored in a request value mapping, if any."""
    if not ctx:
        return None
    value = ctx.get(_key(claims_key))
    return value if isinstance(value, Claims) else None


def get_user_id(c: Context, claims_key: str = "") -> str:
    claims = get_claims(c, claims_key)
    return claims.user_id if claims is not None else ""


def get_username(c: Context, claims_key: str = "") -> str:
    claims = get_claims(c, claims_key)
    return claims.username if claims is not None else ""


def session_auth(store: SessionStore) -> Middleware:
    """Require a valid session ID from a cookie or header."""
    return session_auth_with_config(SessionConfig(session_store=store))


def session_auth_with_config(config: SessionConfig | None) -> Middleware:
    """Session middleware with custom settings; raises ValueError on a bad config."""
    if config is None:
        raise ValueError("session auth middleware: config is required")
    if config.session_store is None:
        raise ValueError("session auth middleware: session store is required")
    config = replace(
        config,
        skip_paths=list(config.skip_paths),
        session_key=config.session_key or DEFAULT_SESSION_KEY,
    )
    store = config.session_store

    def middleware(next_handler: Handler) -> Handler:
        def handler(c: Context) -> Any:
            request = c.request
            if _skipped(request.path, config.skip_paths):
                return next_handler(c)

            session_id = request.cookie(config.session_key) or ""
            if not session_id:
                session_id = request.headers.get(config.session_key) or ""
            if not session_id:
                raise _error(ErrorCode.UNAUTHORIZED, "missing session")

            try:
                valid = store.validate(session_id)
            except Exception as exc:
                raise _error(
                    ErrorCode.INTERNAL_SERVER_ERROR,
                    "session validation failed",
                    {"error": str(exc)},
                ) from exc
            if not valid:
                raise _error(ErrorCode.UNAUTHORIZED, "invalid or expired session")

            try:
                data = store.get(session_id)
            except Exception as exc:
                raise _error(
                    ErrorCode.INTERNAL_SERVER_ERROR,
                    "failed to retrieve session data",
                    {"error": str(exc)},
                ) from exc

            c.set("session", data)
            c.set("session_id", session_id)
            c.set_request(request.with_values({"session": data, "session_id": session_id}))
            return next_handler(c)

        return handler

    return middleware