from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypedDict

if TYPE_CHECKING:
    from .models import RequestConfig, TransportFailure, TransportSuccess
    from .response import Response


class BodyStream(Protocol):
    def read(self) -> bytes: ...

    def close(self) -> None: ...


class TransportOptions(TypedDict, total=False):
    """Options handed to a transport. Absent keys keep the transport defaults."""

    method: str
    header: list[str]
    content: str | bytes
    proxy: Any
    request_fulluri: bool
    follow_location: bool
    max_redirects: int
    protocol_version: float
    timeout: float
    ignore_errors: bool


class Transport(Protocol):
    def open(
        self, url: str, options: TransportOptions
    ) -> "TransportSuccess | TransportFailure": ...


Handler = Callable[[Any], Any]
SettledHandler = Callable[[], Any]

NextFn = Callable[["RequestConfig"], "Response"]
Middleware = Callable[["RequestConfig", NextFn], "Response"]
