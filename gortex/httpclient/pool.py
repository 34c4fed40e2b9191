"""Named pool of HTTP clients created on demand."""

from __future__ import annotations

import threading
from collections.abc import Callable

from .client import Client, ClientMetrics, default_config

ClientFactory = Callable[[str], Client]


def default_factory(name: str) -> Client:
    """Create a client tuned for the well-known names, else with defaults."""
    config = default_config()
    if name == "internal":
        config.timeout = 5.0
        config.max_idle_conns_per_host = 20
    elif name == "external":
        config.timeout = 30.0
        config.max_idle_conns_per_host = 5
    elif name == "long-poll":
        config.timeout = 300.0
        config.max_idle_conns_per_host = 2
    return Client(config)


class ClientPool:
    """Thread-safe mapping of names to clients, built by a factory on first use."""

    def __init__(self, factory: ClientFactory | None = None) -> None:
        self._lock = threading.Lock()
        self._clients: dict[str, Client] = {}
        self._factory: ClientFactory = factory if factory is not None else default_factory

    def get(self, name: str) -> Client:
        """Return the named client, creating it when it does not exist yet."""
        with self._lock:
            client = self._clients.get(name)
            if client is None:
                client = self._factory(name)
                self._clients[name] = client
            return client

    def get_default(self) -> Client:
        return self.get("default")

    def set(self, name: str, client: Client) -> None:
        """Add or replace a client, closing the one it replaces."""
        with self._lock:
            old = self._clients.get(name)
            if old is not None and old is not client:
                old.close()
            self._clients[name] = client

    def remove(self, name: str) -> None:
        """Close and drop a client; unknown names are ignored."""
        with self._lock:
            client = self._clients.pop(name, None)
        if client is not None:
            client.close()

    def close(self) -> None:
        """Close and drop every client."""
        with self._lock:
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()

    def get_metrics(self, name: str) -> ClientMetrics:
        """Return the metrics of a named client; raises KeyError when it is absent."""
        with self._lock:
            client = self._clients.get(name)
        if client is None:
            raise KeyError(f"client {name} not found")
        return client.get_metrics()

    def get_all_metrics(self) -> dict[str, ClientMetrics]:
        with self._lock:
            clients = dict(self._clients)
        return {name: client.get_metrics() for name, client in clients.items()}

    def size(self) -> int:
        with self._lock:
            return len(self._clients)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._clients)