import logging
from dataclasses import dataclass
from urllib.parse import urlparse, urlunparse

import httpx

from configs import app_config

from .constants import UNKNOWN_ERROR_REASON
from .models import TransportFailure, TransportSuccess
from .types import TransportOptions

logger = logging.getLogger(__name__)


@dataclass
class ProxyConfig:
    url: str
    auth: tuple[str, str] | None = None

    def to_httpx_proxy(self) -> str:
        if not self.auth:
            return self.url
        parsed = urlparse(self.url)
        netloc = f"{self.auth[0]}:{self.auth[1]}@{parsed.hostname}"
        if parsed.port:
            netloc += f":{parsed.port}"
        return urlunparse(parsed._replace(netloc=netloc))


def is_local_url(url: str) -> bool:
    """Same-origin test used for the ``basic``/``cors`` response type."""
    parsed = urlparse(url)
    if parsed.scheme in ("", "file"):
        return True
    return (parsed.hostname or "").lower() in app_config.local_hosts


def status_line(response: httpx.Response) -> str:
    return f"{response.http_version} {response.status_code} {response.reason_phrase}".rstrip()


def raw_header_lines(response: httpx.Response) -> tuple[str, ...]:
    """Rebuild the raw status/header block of every hop, oldest first."""
    lines: list[str] = []
    for hop in [*response.history, response]:
        lines.append(status_line(hop))
        for name, value in hop.headers.raw:
            lines.append(f"{name.decode('latin-1')}: {value.decode('latin-1')}")
    return tuple(lines)


class StreamHandle:
    """Body stream of a streamed httpx response; owns the client that produced it."""

    def __init__(self, response: httpx.Response, client: httpx.Client):
        self._response = response
        self._client = client
        self._closed = False

    def read(self) -> bytes:
        return b"".join(self._response.iter_bytes())

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
        finally:
            self._client.close()

    @property
    def closed(self) -> bool:
        return self._closed


class HttpxTransport:
    """Default transport, one blocking httpx call per ``open``.

    ``transport`` is handed to ``httpx.Client`` untouched, tests pass an
    ``httpx.MockTransport`` there.
    """

    def __init__(
        self,
        default_timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._default_timeout = default_timeout or app_config.FETCH_DEFAULT_TIMEOUT
        self._transport = transport

    def _get_proxy_url(self, proxy) -> str | None:
        if not proxy:
            return None
        if isinstance(proxy, str):
            return proxy
        return proxy.to_httpx_proxy()

    def _build_client(self, options: TransportOptions) -> httpx.Client:
        max_redirects = options.get("max_redirects", app_config.FETCH_MAX_REDIRECTS)
        follow = options.get("follow_location", True) and max_redirects > 1
        return httpx.Client(
            proxy=None if self._transport else self._get_proxy_url(options.get("proxy")),
            timeout=options.get("timeout", self._default_timeout),
            follow_redirects=follow,
            max_redirects=max(max_redirects - 1, 0),
            transport=self._transport,
        )

    def _build_headers(self, options: TransportOptions) -> list[tuple[str, str]]:
        headers = []
        for line in options.get("header", []):
            name, sep, value = line.partition(":")
            if not sep:
                logger.debug(f"Dropping bare header line {line!r}, httpx needs a name")
                continue
            headers.append((name.strip(), value.strip()))
        return headers

    def open(self, url: str, options: TransportOptions) -> TransportSuccess | TransportFailure:
        if "protocol_version" in options or "request_fulluri" in options:
            logger.debug(
                f"protocol_version={options.get('protocol_version')} "
                f"request_fulluri={options.get('request_fulluri')} are not configurable with httpx"
            )

        client = self._build_client(options)
        try:
            request = client.build_request(
                method=options.get("method", "GET"),
                url=url,
                headers=self._build_headers(options),
                content=options.get("content"),
            )
            response = client.send(request, stream=True)
        except httpx.TimeoutException as e:
            client.close()
            return TransportFailure(reason=str(e) or type(e).__name__, last_error=repr(e), timed_out=True)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            client.close()
            return TransportFailure(reason=str(e) or UNKNOWN_ERROR_REASON, last_error=repr(e))

        if response.status_code >= 400 and not options.get("ignore_errors", False):
            line = status_line(response)
            response.close()
            client.close()
            return TransportFailure(
                reason=f"failed to open stream: {line}",
                last_error=line,
                status_line=line,
            )

        return TransportSuccess(
            stream=StreamHandle(response, client),
            raw_header_lines=raw_header_lines(response),
            resolved_url=str(response.url),
        )
