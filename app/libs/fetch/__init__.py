"""Synchronous fetch-style HTTP client."""

from .client import FetchClient, fetch, get, post
from .constants import ContentType, Method, ResponseType
from .exceptions import BodyDecodeError, BodyUsedError, FetchError, ResponseError
from .executor import TransportExecutor, build_transport_options
from .headers import HeaderParser, ParsedHeaders
from .middleware import headers_middleware, logging_middleware, timeout_middleware
from .models import RequestConfig, TransportFailure, TransportSuccess
from .response import Response
from .transport import HttpxTransport, ProxyConfig
from .types import BodyStream, Middleware, NextFn, Transport, TransportOptions

__all__ = [
    "FetchClient",
    "fetch",
    "get",
    "post",
    "ContentType",
    "Method",
    "ResponseType",
    "FetchError",
    "ResponseError",
    "BodyDecodeError",
    "BodyUsedError",
    "TransportExecutor",
    "build_transport_options",
    "HeaderParser",
    "ParsedHeaders",
    "RequestConfig",
    "TransportSuccess",
    "TransportFailure",
    "Response",
    "HttpxTransport",
    "ProxyConfig",
    "BodyStream",
    "Middleware",
    "NextFn",
    "Transport",
    "TransportOptions",
    "headers_middleware",
    "logging_middleware",
    "timeout_middleware",
]
