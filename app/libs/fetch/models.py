import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import IO, Any, Union

from configs import app_config

from .body import build_query
from .constants import Method
from .headers import render_header_lines, split_header
from .types import BodyStream

HeaderEntries = Union[str, Iterable[str], Mapping[str, str]]
Body = Union[str, bytes, Mapping[str, Any], list[Any], IO[bytes], None]


def _default_user_agent() -> str | None:
    return app_config.FETCH_USER_AGENT or None


def _as_entries(headers: HeaderEntries) -> list[tuple[str | None, str]]:
    """Normalise every accepted header form into ``(name, value)`` pairs.

    Bare values (no colon) come back with a ``None`` name.
    """
    if isinstance(headers, Mapping):
        return [(str(name).strip(), str(value).strip()) for name, value in headers.items()]
    if isinstance(headers, str):
        headers = [headers]

    entries: list[tuple[str | None, str]] = []
    for header in headers:
        pair = split_header(header)
        entries.append(pair if pair is not None else (None, header))
    return entries


@dataclass
class RequestConfig:
    """Everything needed to issue one request.

    Mutable and reusable; ``clone()`` before sharing across threads.
    ``headers`` keys are header names, or integer positions for bare values
    that were added without a name.
    """

    url: str
    method: str = Method.GET
    headers: dict[str | int, str] = field(default_factory=dict)
    body: Body = None
    proxy: Any = None
    request_fulluri: bool = False
    follow_location: bool = True
    max_redirects: int = field(default_factory=lambda: app_config.FETCH_MAX_REDIRECTS)
    protocol_version: float = field(default_factory=lambda: app_config.FETCH_PROTOCOL_VERSION)
    timeout: float | None = None
    ignore_errors: bool = False
    user_agent: str | None = field(default_factory=_default_user_agent)

    def __post_init__(self):
        if not self.url:
            raise ValueError("url must not be empty")
        if self.headers is None or not isinstance(self.headers, dict):
            raw, self.headers = self.headers, {}
            if raw:
                self.add_headers(raw)

    def _find_name(self, name: str) -> str | None:
        lowered = name.lower()
        for key in self.headers:
            if isinstance(key, str) and key.lower() == lowered:
                return key
        return None

    def _next_position(self) -> int:
        positions = [key for key in self.headers if isinstance(key, int)]
        return max(positions) + 1 if positions else 0

    def has_header(self, name: str) -> bool:
        return self._find_name(name) is not None

    def add_headers(self, headers: HeaderEntries) -> "RequestConfig":
        if self.headers is None:
            self.headers = {}

        for name, value in _as_entries(headers):
            if name is None:
                self.headers[self._next_position()] = value
                continue
            existing = self._find_name(name)
            if existing is not None and existing != name:
                del self.headers[existing]
            self.headers[name] = value
        return self

    def remove_headers(self, headers: HeaderEntries) -> "RequestConfig":
        if not self.headers:
            return self

        if isinstance(headers, Mapping):
            headers = list(headers)
        elif isinstance(headers, str):
            headers = [headers]

        for header in headers:
            pair = split_header(header)
            name = pair[0] if pair is not None else header.strip()
            existing = self._find_name(name)
            if existing is not None:
                del self.headers[existing]
                continue
            for key, value in self.headers.items():
                if isinstance(key, int) and value == header:
                    del self.headers[key]
                    break
        return self

    def apply_fetch_init(self, init: Mapping[str, Any] | None) -> "RequestConfig":
        for key, value in (init or {}).items():
            if key == "method":
                # uppercased on execution
                self.method = value
            elif key == "headers":
                self.add_headers(value)
            elif key == "body":
                self.body = value
            elif key == "redirect":
                self.follow_location = str(value).lower() != "manual"
        return self

    def normalized_method(self) -> str:
        return str(self.method).upper() if self.method else Method.GET.value

    def header_lines(self) -> list[str]:
        lines = render_header_lines(self.headers)
        if self.user_agent and not self.has_header("User-Agent"):
            lines.append(f"User-Agent: {self.user_agent}")
        return lines

    def encoded_body(self) -> str | bytes | IO[bytes] | None:
        if self.body is None or isinstance(self.body, (str, bytes)):
            return self.body
        if hasattr(self.body, "read"):
            return self.body
        return build_query(self.body)

    def clone(self) -> "RequestConfig":
        """Copy with its own header map; a structured body is copied too, streams are shared."""
        body = self.body
        if isinstance(body, (Mapping, list)):
            body = copy.deepcopy(body)
        return replace(self, headers=dict(self.headers or {}), body=body)


@dataclass(frozen=True)
class TransportSuccess:
    stream: BodyStream
    raw_header_lines: tuple[str, ...]
    resolved_url: str
    timed_out: bool = False


@dataclass(frozen=True)
class TransportFailure:
    reason: str = ""
    last_error: str = ""
    timed_out: bool = False
    # set when the transport refused an error status because ignore_errors was off
    status_line: str = ""
