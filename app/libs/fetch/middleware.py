import logging

from .models import RequestConfig
from .response import Response
from .types import Middleware, NextFn


def timeout_middleware(timeout: float) -> Middleware:
    def middleware(request: RequestConfig, next: NextFn) -> Response:
        request = request.clone()
        request.timeout = timeout
        return next(request)

    return middleware


def logging_middleware(logger: logging.Logger | None = None) -> Middleware:
    log = logger or logging.getLogger(__name__)

    def middleware(request: RequestConfig, next: NextFn) -> Response:
        log.info(f"-> {request.normalized_method()} {request.url}")
        response = next(request)
        if response.rejected:
            log.info(f"<- {response.type} ({response.reason})")
        else:
            log.info(f"<- {response.status} {response.status_text}".rstrip())
        return response

    return middleware


def headers_middleware(**headers: str) -> Middleware:
    def middleware(request: RequestConfig, next: NextFn) -> Response:
        return next(request.clone().add_headers(headers))

    return middleware
