"""Small request/response model shared by the handlers and middleware."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from http.cookies import CookieError, SimpleCookie
from typing import Any


class Headers(MutableMapping[str, str]):
    """Case-insensitive, multi-valued HTTP header collection.

    Item access reads or replaces the first value of a header;
    ``add`` and ``get_all`` work with every value.
    """

    def __init__(self, initial: Mapping[str, str] | Iterable[tuple[str, str]] | None = None):
        self._items: dict[str, tuple[str, list[str]]] = {}
        if initial is None:
            return
        pairs = initial.items() if isinstance(initial, Mapping) else initial
        for key, value in pairs:
            self.add(key, value)

    def __getitem__(self, key: str) -> str:
        return self._items[key.lower()][1][0]

    def __setitem__(self, key: str, value: str) -> None:
        self._items[key.lower()] = (key, [value])

    def __delitem__(self, key: str) -> None:
        lowered = key.lower()
        if lowered not in self._items:
            raise KeyError(key)
        self._items.pop(lowered)

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Headers({ {name: values for name, values in self._items.values()} !r})"

    def add(self, key: str, value: str) -> None:
        """Append a value to a header, keeping the values already there."""
        lowered = key.lower()
        if lowered in self._items:
            self._items[lowered][1].append(value)
        else:
            self._items[lowered] = (key, [value])

    def get_all(self, key: str) -> list[str]:
        """Return every value of a header, in the order they were added."""
        entry = self._items.get(key.lower())
        return list(entry[1]) if entry else []


@dataclass
class Request:
    """An incoming HTTP request together with its attached values."""

    method: str = "GET"
    path: str = "/"
    headers: Headers = field(default_factory=Headers)
    body: bytes = b""
    remote_addr: str = ""
    values: dict[str, Any] = field(default_factory=dict)

    def cookie(self, name: str) -> str | None:
        """Return the value of the named cookie, or None when it is absent."""
        for raw in self.headers.get_all("Cookie"):
            jar = SimpleCookie()
            try:
                jar.load(raw)
            except CookieError:
                continue
            if name in jar:
                return jar[name].value
        return None

    def with_values(self, values: Mapping[str, Any]) -> Request:
        """Return a copy of the request whose values are extended by ``values``."""
        return replace(self, values={**self.values, **values})


@dataclass
class Response:
    """An in-memory HTTP response being built by a handler."""

    headers: Headers = field(default_factory=Headers)
    status: int = 200
    body: bytearray = field(default_factory=bytearray)
    _header_written: bool = field(default=False, repr=False)

    @property
    def header_written(self) -> bool:
        return self._header_written

    def write_header(self, status: int) -> None:
        """Fix the status code; only the first call takes effect."""
        if self._header_written:
            return
        self.status = status
        self._header_written = True

    def write(self, data: bytes | str) -> int:
        """Append to the body, committing a 200 status if none was written."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not self._header_written:
            self.write_header(200)
        self.body.extend(data)
        return len(data)

    def text(self) -> str:
        """Return the body decoded as UTF-8."""
        return bytes(self.body).decode("utf-8")


def _json_default(obj: Any) -> Any:
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="replace")
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


@dataclass
class Context:
    """Per-request state handed to handlers and middleware."""

    request: Request = field(default_factory=Request)
    response: Response = field(default_factory=Response)
    values: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def json(self, status: int, data: Any) -> None:
        """Write ``data`` as a JSON body with the given status."""
        payload = json.dumps(data, default=_json_default) + "\n"
        self.response.headers["Content-Type"] = "application/json"
        self.response.write_header(status)
        self.response.write(payload)

    def string(self, status: int, text: str) -> None:
        """Write a plain-text body with the given status."""
        self.response.headers["Content-Type"] = "text/plain"
        self.response.write_header(status)
        self.response.write(text)

    def set_request(self, request: Request) -> None:
        self.request = request

    def set_response(self, response: Response) -> None:
        self.response = response