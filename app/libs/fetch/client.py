from collections.abc import Mapping
from typing import Any

from .constants import ContentType, Method
from .executor import TransportExecutor
from .models import Body, RequestConfig
from .response import Response
from .types import Handler, Middleware, Transport


class FetchClient:
    """Entry points in the style of ``fetch`` and jQuery's ``$.get``/``$.post``.

    Every call blocks until the transport returns and hands back an already
    settled ``Response``.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        middlewares: list[Middleware] | None = None,
        default_headers: Mapping[str, str] | None = None,
    ):
        self._executor = TransportExecutor(transport)
        self._middlewares = middlewares or []
        self._default_headers = dict(default_headers or {})

    def _merge_headers(self, config: RequestConfig) -> RequestConfig:
        if not self._default_headers:
            return config
        merged = config.clone()
        for name, value in self._default_headers.items():
            if not merged.has_header(name):
                merged.add_headers({name: value})
        return merged

    def _has_default_header(self, name: str) -> bool:
        return name.lower() in (key.lower() for key in self._default_headers)

    def execute(self, config: RequestConfig) -> Response:
        config = self._merge_headers(config)
        if self._middlewares:
            return self._execute_with_middleware(config, 0)
        return self._executor.execute(config)

    def _execute_with_middleware(self, config: RequestConfig, index: int) -> Response:
        if index >= len(self._middlewares):
            return self._executor.execute(config)

        middleware = self._middlewares[index]

        def next_fn(req: RequestConfig) -> Response:
            return self._execute_with_middleware(req, index + 1)

        return middleware(config, next_fn)

    def fetch(self, url: str, init: Mapping[str, Any] | None = None) -> Response:
        config = RequestConfig(url=url)
        config.apply_fetch_init(init)
        config.ignore_errors = True
        return self.execute(config)

    def _ajax(
        self,
        method: Method,
        url: str,
        data: Body = None,
        success: Handler | None = None,
        data_type: str | None = None,
    ) -> Response:
        config = RequestConfig(url=url, method=method, body=data or None)
        if data_type:
            config.add_headers(f"Accept: {data_type}")
        has_content_type = config.has_header("Content-Type") or self._has_default_header("Content-Type")
        if method == Method.POST and not has_content_type:
            config.add_headers(f"Content-Type: {ContentType.URL_ENCODED}")
        config.ignore_errors = False

        response = self.execute(config)
        if callable(success):
            return response.then(success)
        return response

    def get(
        self,
        url: str,
        data: Body = None,
        success: Handler | None = None,
        data_type: str | None = None,
    ) -> Response:
        return self._ajax(Method.GET, url, data, success, data_type)

    def post(
        self,
        url: str,
        data: Body = None,
        success: Handler | None = None,
        data_type: str | None = None,
    ) -> Response:
        return self._ajax(Method.POST, url, data, success, data_type)


_default_client: FetchClient | None = None


def _client() -> FetchClient:
    global _default_client
    if _default_client is None:
        _default_client = FetchClient()
    return _default_client


def fetch(url: str, init: Mapping[str, Any] | None = None) -> Response:
    return _client().fetch(url, init)


def get(url: str, data: Body = None, success: Handler | None = None, data_type: str | None = None) -> Response:
    return _client().get(url, data, success, data_type)


def post(url: str, data: Body = None, success: Handler | None = None, data_type: str | None = None) -> Response:
    return _client().post(url, data, success, data_type)
