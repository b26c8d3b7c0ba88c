import copy
import io
import json
import logging
import struct
from collections.abc import Iterable
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from .body import flatten, is_binary, parse_form
from .constants import REDIRECT_STATUSES, UNKNOWN_ERROR_REASON, ResponseType
from .exceptions import BodyDecodeError, BodyUsedError, ResponseError
from .headers import ParsedHeaders
from .transport import is_local_url
from .types import BodyStream, Handler, SettledHandler

if TYPE_CHECKING:
    from .models import RequestConfig

logger = logging.getLogger(__name__)


def _as_list(callbacks) -> list:
    if isinstance(callbacks, (list, tuple)):
        return list(callbacks)
    return [callbacks]


class Response:
    """Result of one execution, shaped after the Fetch API ``Response``.

    The outcome is settled when the object is built: ``type == "error"``
    means rejected, anything else resolved. ``then``/``catch`` never
    re-evaluate it, they only replace the settled value or reason.

    The body stream can be consumed once. Every reader marks the body used
    before reading. Readers on an error response always raise
    ``ResponseError``; a second read of a resolved one raises ``BodyUsedError``.
    """

    FIELDS = ("headers", "ok", "redirected", "status", "status_text", "type", "url", "body", "body_used")

    def __init__(
        self,
        *,
        type: ResponseType = ResponseType.ERROR,
        status: int = 0,
        status_text: str = "",
        url: str = "",
        headers: ParsedHeaders | None = None,
        body: BodyStream | None = None,
        redirected: bool = False,
        reason: Any = None,
        request: "RequestConfig | None" = None,
    ):
        self._type = ResponseType(type)
        self._status = status
        self._status_text = status_text
        self._url = url
        self._headers = headers or ParsedHeaders()
        self._body = body
        self._body_used = False
        self._redirected = redirected
        self._request = request.clone() if request is not None else None

        self._value: Any = self
        self._reason: Any = reason

    @classmethod
    def error(cls) -> "Response":
        return cls(type=ResponseType.ERROR, reason=UNKNOWN_ERROR_REASON)

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> "Response":
        if status not in REDIRECT_STATUSES:
            raise ValueError(f"Invalid redirect status: {status}")
        return cls(
            type=ResponseType.BASIC if is_local_url(url) else ResponseType.CORS,
            status=status,
            url=url,
            redirected=True,
        )

    def __repr__(self) -> str:
        return f"<Response [{self._status}] {self._type}>"

    @property
    def headers(self) -> ParsedHeaders:
        return self._headers

    @property
    def ok(self) -> bool:
        return self._type != ResponseType.ERROR and 200 <= self._status <= 299

    @property
    def redirected(self) -> bool:
        return self._redirected

    @property
    def status(self) -> int:
        return self._status

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def type(self) -> ResponseType:
        return self._type

    @property
    def url(self) -> str:
        return self._url

    @property
    def body(self) -> BodyStream | None:
        # handing out the raw stream counts as using it
        self._body_used = True
        return self._body

    @property
    def body_used(self) -> bool:
        return self._body_used

    @property
    def request(self) -> "RequestConfig | None":
        return self._request

    @property
    def value(self) -> Any:
        return self._value

    @property
    def reason(self) -> Any:
        return self._reason

    @property
    def rejected(self) -> bool:
        return self._type == ResponseType.ERROR

    def close(self) -> None:
        body, self._body = self._body, None
        if body is not None:
            body.close()

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, *_args: Any) -> None:
        self.close()

    def __del__(self):
        if getattr(self, "_body", None) is not None:
            self.close()

    def clone(self) -> "Response":
        if self._body_used:
            raise BodyUsedError("Cannot clone a Response whose body was already read.")

        content = b""
        if self._body is not None:
            content = self._read_stream()
            self.close()
        self._body = io.BytesIO(content)

        result = copy.copy(self)
        result._body = io.BytesIO(content)
        if self._value is self:
            result._value = result
        return result

    # Body readers

    def _read_stream(self) -> bytes:
        content = self._body.read()
        if isinstance(content, str):
            content = content.encode("utf-8")
        return content

    def _consume(self) -> bytes:
        already_used, self._body_used = self._body_used, True
        if self._type == ResponseType.ERROR:
            raise ResponseError(response=self, request=self._request)
        if already_used:
            raise BodyUsedError()

        if self._body is None:
            return b""
        try:
            return self._read_stream()
        finally:
            self.close()

    def text(self) -> str:
        """Body as text; binary content comes back hex-encoded, not decoded."""
        content = self._consume()
        if is_binary(content):
            return content.hex()
        return content.decode("utf-8")

    def json(self, strict: bool = False) -> Any:
        """Decode the body as JSON.

        Objects become ``SimpleNamespace`` records, or plain dicts when ``strict``.
        """
        content = self._consume()
        object_hook = None if strict else (lambda obj: SimpleNamespace(**obj))
        try:
            return json.loads(content, object_hook=object_hook)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BodyDecodeError(
                f"Invalid JSON body: {e}",
                previous=e,
                response=self,
                request=self._request,
            ) from e

    def blob(self) -> bytes:
        # Inverse of text(): hex text is turned back into bytes
        content = self._consume()
        if is_binary(content):
            return content
        try:
            return bytes.fromhex(content.decode("utf-8"))
        except ValueError:
            return content

    def array_buffer(self, fmt: str = ">I") -> list[Any]:
        content = self._consume()
        size = struct.calcsize(fmt)
        usable = len(content) - len(content) % size
        return [value for unit in struct.iter_unpack(fmt, content[:usable]) for value in unit]

    def form_data(self) -> dict[str, Any]:
        text = self._consume().decode("utf-8", errors="replace")
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            return parse_form(text)
        if isinstance(data, (dict, list)):
            return flatten(data)
        return parse_form(text)

    # Promise-like chaining

    def then(self, on_fulfilled: Handler | None = None, on_rejected: Handler | None = None) -> "Response":
        if not self.rejected:
            if callable(on_fulfilled):
                self._value = on_fulfilled(self._value)
        elif callable(on_rejected):
            self._reason = on_rejected(self._reason)
        return self

    def catch(self, on_rejected: Handler | None) -> "Response":
        return self.then(None, on_rejected)

    def finally_(self, on_settled: SettledHandler | None = None) -> None:
        if callable(on_settled):
            on_settled()
        self.close()
        self._body_used = True

    def always(self, callbacks: SettledHandler | Iterable[SettledHandler]) -> None:
        for callback in _as_list(callbacks):
            self.finally_(callback)

    def done(self, callbacks: Handler | Iterable[Handler]) -> "Response":
        for callback in _as_list(callbacks):
            self.then(callback)
        return self

    def fail(self, callbacks: Handler | Iterable[Handler]) -> "Response":
        for callback in _as_list(callbacks):
            self.catch(callback)
        return self
