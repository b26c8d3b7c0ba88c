"""Pytest configuration"""

import io

import pytest

from libs.fetch.models import TransportFailure, TransportSuccess


class StubTransport:
    """Transport double that returns a canned outcome and records every call."""

    def __init__(self, outcome=None):
        self.outcome = outcome
        self.calls = []

    def open(self, url, options):
        self.calls.append((url, options))
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome

    @property
    def last_options(self):
        return self.calls[-1][1]


def success(lines, body=b"", url="https://example.com/", timed_out=False):
    return TransportSuccess(
        stream=io.BytesIO(body),
        raw_header_lines=tuple(lines),
        resolved_url=url,
        timed_out=timed_out,
    )


@pytest.fixture
def stub_transport():
    return StubTransport(success(["HTTP/1.1 200 OK", "Content-Type: text/plain"], b"hello"))


@pytest.fixture
def failing_transport():
    return StubTransport(TransportFailure(reason="Connection refused", last_error="ConnectError()"))


@pytest.fixture
def make_success():
    return success
