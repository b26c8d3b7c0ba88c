import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import RequestConfig
    from .response import Response


class FetchError(Exception):
    """Base exception for the fetch client.

    ``code`` may be any value, not only an int. ``previous`` links to the
    error that caused this one and is also set as ``__cause__``.
    """

    message: str = ""

    def __init__(
        self,
        message: str | None = None,
        code: Any = 0,
        previous: BaseException | None = None,
    ) -> None:
        self.message = message if message is not None else self.__class__.message
        self.code = code
        super().__init__(self.message)
        if previous is not None:
            self.__cause__ = previous

    @property
    def previous(self) -> BaseException | None:
        return self.__cause__

    def to_dict(self) -> dict[str, Any]:
        stack = []
        previous = self.previous
        while previous is not None:
            stack.append(
                {
                    "status": getattr(previous, "code", 0),
                    "message": getattr(previous, "message", str(previous)),
                    "type": type(previous).__name__,
                }
            )
            previous = previous.__cause__
        return {"status": self.code, "message": self.message, "type": type(self).__name__, "stack": stack}

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), default=str)


class ResponseError(FetchError):
    """A body was read from a response that carries no usable content."""

    message = "Nothing to read, an error occurred."
    is_network_error = True

    def __init__(
        self,
        message: str | None = None,
        code: Any = 0,
        previous: BaseException | None = None,
        response: "Response | None" = None,
        request: "RequestConfig | None" = None,
    ) -> None:
        super().__init__(message, code, previous)
        self.response = response
        self.request = request


class BodyDecodeError(ResponseError):
    """The body was read but its content could not be decoded."""

    message = "Response body could not be decoded."
    is_network_error = False


class BodyUsedError(FetchError):
    message = "Response body was already used."
