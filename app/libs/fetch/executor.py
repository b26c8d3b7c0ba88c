import logging
import time

from extensions.ext_logging import trace_id_generator, trace_id_var

from .constants import (
    NETWORK_ERROR_TEXT,
    NO_HEADERS_REASON,
    TIMED_OUT_REASON,
    UNKNOWN_ERROR_REASON,
    ResponseType,
)
from .headers import HeaderParser, match_status_line
from .models import RequestConfig, TransportFailure, TransportSuccess
from .response import Response
from .transport import HttpxTransport, is_local_url
from .types import Transport, TransportOptions

logger = logging.getLogger(__name__)


def build_transport_options(config: RequestConfig) -> TransportOptions:
    """Translate a config into transport options, leaving out empty ones."""
    options: TransportOptions = {
        "method": config.normalized_method(),
        # always sent, False has to reach the transport
        "follow_location": bool(config.follow_location) and config.max_redirects > 1,
    }

    header = config.header_lines()
    if header:
        options["header"] = header

    content = config.encoded_body()
    if content:
        options["content"] = content

    if config.proxy:
        options["proxy"] = config.proxy
    if config.request_fulluri:
        options["request_fulluri"] = True
    if config.max_redirects:
        options["max_redirects"] = config.max_redirects
    if config.protocol_version:
        options["protocol_version"] = config.protocol_version
    if config.timeout:
        options["timeout"] = config.timeout
    if config.ignore_errors:
        options["ignore_errors"] = True
    return options


class TransportExecutor:
    """Runs a ``RequestConfig`` through a transport and settles a ``Response``.

    Network problems never raise from ``execute``; they come back as a
    response of type ``error`` whose reason says what went wrong.
    """

    def __init__(self, transport: Transport | None = None):
        self._transport = transport or HttpxTransport()

    def execute(self, config: RequestConfig) -> Response:
        token = trace_id_var.set(trace_id_generator())
        try:
            options = build_transport_options(config)
            logger.info(f"-> {options['method']} {config.url}")
            start_time = time.time()

            outcome = self._open(config.url, options)
            if isinstance(outcome, TransportSuccess):
                response = self._from_success(outcome, config)
            else:
                response = self._from_failure(outcome, config)

            latency_ms = int((time.time() - start_time) * 1000)
            if response.rejected:
                logger.warning(f"<- {response.type}: {response.reason} ({latency_ms}ms)")
            else:
                logger.info(f"<- {response.status} {response.type} ({latency_ms}ms)")
            return response
        finally:
            trace_id_var.reset(token)

    def _open(self, url: str, options: TransportOptions) -> TransportSuccess | TransportFailure:
        try:
            return self._transport.open(url, options)
        except Exception as e:
            # transports should report failures, not raise them
            logger.exception(f"Transport raised while opening {url}")
            return TransportFailure(reason=str(e), last_error=repr(e))

    def _from_success(self, outcome: TransportSuccess, config: RequestConfig) -> Response:
        url = outcome.resolved_url or config.url
        if not outcome.raw_header_lines:
            outcome.stream.close()
            return Response(
                type=ResponseType.ERROR,
                status_text=NETWORK_ERROR_TEXT,
                url=url,
                reason=TIMED_OUT_REASON if outcome.timed_out else NO_HEADERS_REASON,
                request=config,
            )

        parsed = HeaderParser.parse(outcome.raw_header_lines)
        return Response(
            type=ResponseType.BASIC if is_local_url(url) else ResponseType.CORS,
            status=parsed.status,
            status_text="OK" if parsed.ok else "",
            url=url,
            headers=parsed,
            body=outcome.stream,
            redirected=parsed.redirected,
            request=config,
        )

    def _from_failure(self, outcome: TransportFailure, config: RequestConfig) -> Response:
        matched = match_status_line(outcome.status_line) if outcome.status_line else None
        if matched is not None:
            # HTTP error status refused by the transport, eg: HTTP/1.1 405 Method Not Allowed
            status, status_text = matched
            return Response(
                type=ResponseType.BASIC if is_local_url(config.url) else ResponseType.CORS,
                status=status,
                status_text=status_text,
                url=config.url,
                headers=HeaderParser.parse([outcome.status_line]),
                request=config,
            )

        if outcome.timed_out:
            reason = TIMED_OUT_REASON
        else:
            reason = outcome.reason or outcome.last_error or UNKNOWN_ERROR_REASON
        return Response(
            type=ResponseType.ERROR,
            status_text=NETWORK_ERROR_TEXT,
            url=config.url,
            reason=reason,
            request=config,
        )
