"""HTTP client with connection pooling and request metrics."""

from __future__ import annotations

import threading
import time
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any

import requests
from requests.adapters import HTTPAdapter


@dataclass
class ClientConfig:
    """Settings of a pooled HTTP client; durations are in seconds."""

    max_idle_conns: int = 100
    max_idle_conns_per_host: int = 10
    max_conns_per_host: int = 0
    idle_conn_timeout: float = 90.0
    timeout: float = 30.0
    dial_timeout: float = 10.0
    tls_handshake_timeout: float = 10.0
    keep_alive: float = 30.0
    insecure_skip_verify: bool = False
    enable_metrics: bool = True


def default_config() -> ClientConfig:
    """Return the default client configuration."""
    return ClientConfig()


@dataclass
class TransportMetrics:
    idle_conns: int = 0
    idle_conns_per_host: dict[str, int] = field(default_factory=dict)


@dataclass
class ClientMetrics:
    """Snapshot of a client's counters; ``average_response_time`` is in seconds."""

    active_connections: int = 0
    idle_connections: int = 0
    total_connections: int = 0
    connection_reuse: int = 0
    total_requests: int = 0
    total_responses: int = 0
    total_errors: int = 0
    average_response_time: float = 0.0
    status_codes: dict[int, int] = field(default_factory=dict)
    transport_metrics: TransportMetrics = field(default_factory=TransportMetrics)


@dataclass
class _Counters:
    active_connections: int = 0
    total_connections: int = 0
    connection_reuse: int = 0
    total_requests: int = 0
    total_responses: int = 0
    total_errors: int = 0
    total_response_time: float = 0.0
    request_count: int = 0
    status_codes: Counter = field(default_factory=Counter)


class Client:
    """Session-backed HTTP client that keeps connection pools and tracks metrics."""

    def __init__(self, config: ClientConfig | None = None) -> None:
        self.config = replace(config) if config is not None else default_config()
        limited = self.config.max_conns_per_host > 0
        adapter = HTTPAdapter(
            pool_connections=max(1, self.config.max_idle_conns),
            pool_maxsize=max(
                1,
                self.config.max_conns_per_host if limited else self.config.max_idle_conns_per_host,
            ),
            pool_block=limited,
        )
        self.session = requests.Session()
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.verify = not self.config.insecure_skip_verify
        self._lock = threading.Lock()
        self._counters = _Counters()
        self.closed = False

    @property
    def timeout(self) -> float:
        return self.config.timeout

    def _prepare(self, request: Any) -> requests.PreparedRequest:
        if isinstance(request, requests.PreparedRequest):
            return request
        return self.session.prepare_request(request)

    def _send(self, prepared: requests.PreparedRequest, timeout: float) -> requests.Response:
        connect_timeout = min(self.config.dial_timeout, timeout)
        if not self.config.enable_metrics:
            return self.session.send(prepared, timeout=(connect_timeout, timeout))
        with self._lock:
            self._counters.active_connections += 1
            if (prepared.headers.get("Connection") or "") != "close":
                self._counters.connection_reuse += 1
            else:
                self._counters.total_connections += 1
        try:
            return self.session.send(prepared, timeout=(connect_timeout, timeout))
        finally:
            with self._lock:
                self._counters.active_connections -= 1

    def _do(self, request: Any, timeout: float) -> requests.Response:
        enabled = self.config.enable_metrics
        if enabled:
            with self._lock:
                self._counters.total_requests += 1
        prepared = self._prepare(request)
        start = time.perf_counter()
        try:
            response = self._send(prepared, timeout)
        except Exception:
            if enabled:
                with self._lock:
                    self._counters.total_errors += 1
            raise
        elapsed = time.perf_counter() - start
        if enabled:
            with self._lock:
                self._counters.total_responses += 1
                self._counters.total_response_time += elapsed
                self._counters.request_count += 1
                self._counters.status_codes[response.status_code] += 1
        return response

    def do(self, request: Any) -> requests.Response:
        """Send a request, recording counters, timing and status code."""
        return self._do(request, self.config.timeout)

    def do_with_timeout(self, request: Any, timeout: float) -> requests.Response:
        """Send a request that must finish within ``timeout`` seconds."""
        return self._do(request, timeout)

    def get_metrics(self) -> ClientMetrics:
        """Return a snapshot of the metrics; empty when metrics are disabled."""
        if not self.config.enable_metrics:
            return ClientMetrics()
        with self._lock:
            c = self._counters
            average = c.total_response_time / c.request_count if c.request_count else 0.0
            return ClientMetrics(
                active_connections=c.active_connections,
                idle_connections=0,
                total_connections=c.total_connections,
                connection_reuse=c.connection_reuse,
                total_requests=c.total_requests,
                total_responses=c.total_responses,
                total_errors=c.total_errors,
                average_response_time=average,
                status_codes=dict(c.status_codes),
                transport_metrics=TransportMetrics(),
            )

    def close(self) -> None:
        """Close idle pooled connections."""
        self.session.close()
        self.closed = True


def new_default() -> Client:
    """Create a client with the default configuration."""
    return Client(default_config())