import io
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from libs.fetch.constants import ResponseType
from libs.fetch.exceptions import BodyDecodeError, BodyUsedError, ResponseError
from libs.fetch.headers import HeaderParser
from libs.fetch.models import RequestConfig
from libs.fetch.response import Response


def make_response(body=b"", status=200, type=ResponseType.CORS, request=None):
    return Response(
        type=type,
        status=status,
        status_text="OK" if 200 <= status <= 299 else "",
        url="https://example.com/",
        headers=HeaderParser.parse([f"HTTP/1.1 {status} X"]),
        body=io.BytesIO(body),
        request=request,
    )


def make_error(reason="Connection refused", request=None):
    return Response(
        type=ResponseType.ERROR,
        status_text="network error",
        url="https://example.com/",
        reason=reason,
        request=request,
    )


class TestResponseFields:
    def test_success_fields(self):
        resp = make_response(status=201)
        assert resp.ok is True
        assert resp.status == 201
        assert resp.type == "cors"
        assert resp.redirected is False
        assert resp.body_used is False
        assert resp.url == "https://example.com/"

    def test_error_fields(self):
        resp = make_error()
        assert resp.ok is False
        assert resp.status == 0
        assert resp.type == "error"
        assert resp.status_text == "network error"
        assert resp.reason == "Connection refused"

    def test_fields_read_only(self):
        resp = make_response()
        with pytest.raises(AttributeError):
            resp.status = 500

    def test_visible_fields(self):
        resp = make_response()
        for name in Response.FIELDS:
            assert hasattr(resp, name)

    def test_body_access_marks_used(self):
        resp = make_response(b"data")
        stream = resp.body
        assert stream.read() == b"data"
        assert resp.body_used is True

    def test_request_is_snapshot(self):
        config = RequestConfig(url="https://example.com")
        resp = make_response(request=config)
        config.add_headers("X-A: 1")
        assert resp.request.headers == {}

    def test_initial_value_is_response(self):
        resp = make_response()
        assert resp.value is resp


class TestFactories:
    def test_error(self):
        resp = Response.error()
        assert resp.type == "error"
        assert resp.status == 0
        assert resp.ok is False
        assert resp.reason == "Unknown network error"

    def test_error_reason_reaches_catch(self):
        reasons = []
        Response.error().catch(reasons.append)
        assert reasons == ["Unknown network error"]

    def test_redirect_default_status(self):
        resp = Response.redirect("https://other.example.com/")
        assert resp.status == 302
        assert resp.redirected is True
        assert resp.type == "cors"
        assert resp.url == "https://other.example.com/"

    def test_redirect_local(self):
        assert Response.redirect("http://localhost/next", 307).type == "basic"

    def test_redirect_invalid_status(self):
        with pytest.raises(ValueError):
            Response.redirect("https://example.com/", 200)


class TestBodyReaders:
    def test_text(self):
        assert make_response(b"hello\nworld").text() == "hello\nworld"

    def test_text_binary_is_hex(self):
        assert make_response(b"\x00\x01\xff").text() == "0001ff"

    def test_json_records_by_default(self):
        data = make_response(b'{"user": {"name": "x"}, "ids": [1]}').json()
        assert isinstance(data, SimpleNamespace)
        assert data.user.name == "x"
        assert data.ids == [1]

    def test_json_strict_dicts(self):
        data = make_response(b'{"a": {"b": 1}}').json(strict=True)
        assert data == {"a": {"b": 1}}

    def test_json_scalar(self):
        assert make_response(b"[1, 2]").json() == [1, 2]

    def test_json_invalid(self):
        resp = make_response(b"not json")
        with pytest.raises(BodyDecodeError) as exc_info:
            resp.json()
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)
        assert exc_info.value.is_network_error is False
        assert exc_info.value.response is resp

    def test_blob_binary(self):
        assert make_response(b"\x00\x01\xff").blob() == b"\x00\x01\xff"

    def test_blob_hex_text(self):
        assert make_response(b"0001ff").blob() == b"\x00\x01\xff"

    def test_blob_plain_text(self):
        assert make_response(b"hello").blob() == b"hello"

    def test_array_buffer_default(self):
        body = (1).to_bytes(4, "big") + (258).to_bytes(4, "big")
        assert make_response(body).array_buffer() == [1, 258]

    def test_array_buffer_ignores_trailing(self):
        body = (7).to_bytes(4, "big") + b"\x01\x02"
        assert make_response(body).array_buffer() == [7]

    def test_array_buffer_custom_format(self):
        assert make_response(b"\x01\x00\x02\x00").array_buffer("<H") == [1, 2]

    def test_form_data_from_json(self):
        body = json.dumps({"a": {"b": 1, "c": [2, 3]}}).encode()
        assert make_response(body).form_data() == {"a.b": 1, "a.c[]": [2, 3]}

    def test_form_data_from_urlencoded(self):
        assert make_response(b"a=1&b=hello+world").form_data() == {"a": "1", "b": "hello world"}

    def test_reader_marks_used_and_closes(self):
        stream = io.BytesIO(b"hello")
        resp = Response(type=ResponseType.CORS, status=200, body=stream)
        resp.text()
        assert resp.body_used is True
        assert stream.closed is True

    @pytest.mark.parametrize("reader", ["text", "json", "blob", "array_buffer", "form_data"])
    def test_second_read_raises(self, reader):
        resp = make_response(b"{}")
        resp.text()
        with pytest.raises(BodyUsedError):
            getattr(resp, reader)()

    @pytest.mark.parametrize("reader", ["text", "json", "blob", "array_buffer", "form_data"])
    def test_read_on_error_raises(self, reader):
        config = RequestConfig(url="https://example.com")
        resp = make_error(request=config)
        with pytest.raises(ResponseError) as exc_info:
            getattr(resp, reader)()
        assert exc_info.value.response is resp
        assert exc_info.value.request.url == "https://example.com"
        assert exc_info.value.is_network_error is True
        assert resp.body_used is True

    def test_error_reads_keep_raising_response_error(self):
        config = RequestConfig(url="https://example.com")
        resp = make_error(request=config)
        with pytest.raises(ResponseError):
            resp.text()
        with pytest.raises(ResponseError) as exc_info:
            resp.text()
        assert exc_info.value.response is resp
        assert exc_info.value.request.url == "https://example.com"

    def test_read_without_body(self):
        resp = Response(type=ResponseType.CORS, status=204)
        assert resp.text() == ""


class TestClone:
    def test_clone_duplicates_body(self):
        resp = make_response(b"payload")
        copy = resp.clone()
        assert copy is not resp
        assert resp.text() == "payload"
        assert copy.text() == "payload"

    def test_clone_after_read(self):
        resp = make_response(b"payload")
        resp.text()
        with pytest.raises(BodyUsedError):
            resp.clone()

    def test_clone_value_points_to_copy(self):
        resp = make_response(b"payload")
        assert resp.clone().value is not resp


class TestRelease:
    def test_close_is_idempotent(self):
        stream = MagicMock()
        resp = Response(type=ResponseType.CORS, status=200, body=stream)
        resp.close()
        resp.close()
        stream.close.assert_called_once()

    def test_context_manager_closes(self):
        stream = io.BytesIO(b"x")
        with Response(type=ResponseType.CORS, status=200, body=stream):
            pass
        assert stream.closed is True


class TestChaining:
    def test_then_replaces_value(self):
        resp = make_response(b"hello")
        result = resp.then(lambda r: r.text()).then(lambda text: text.upper())
        assert result is resp
        assert resp.value == "HELLO"

    def test_then_only_fulfilled_runs_when_resolved(self):
        on_rejected = MagicMock()
        resp = make_response().then(lambda r: "value", on_rejected)
        on_rejected.assert_not_called()
        assert resp.value == "value"

    def test_then_without_fulfilled_does_not_run_rejected(self):
        on_rejected = MagicMock()
        make_response().then(None, on_rejected)
        on_rejected.assert_not_called()

    def test_then_rejected_branch(self):
        on_fulfilled = MagicMock()
        resp = make_error().then(on_fulfilled, lambda reason: f"handled: {reason}")
        on_fulfilled.assert_not_called()
        assert resp.reason == "handled: Connection refused"

    def test_catch(self):
        resp = make_error().catch(lambda reason: reason.lower())
        assert resp.reason == "connection refused"

    def test_catch_on_resolved_is_noop(self):
        on_rejected = MagicMock()
        resp = make_response()
        assert resp.catch(on_rejected) is resp
        on_rejected.assert_not_called()

    def test_state_fixed_after_handlers(self):
        resp = make_error().catch(lambda reason: None)
        on_fulfilled = MagicMock()
        resp.then(on_fulfilled)
        on_fulfilled.assert_not_called()

    def test_finally_runs_and_closes(self):
        stream = io.BytesIO(b"data")
        resp = Response(type=ResponseType.CORS, status=200, body=stream)
        on_settled = MagicMock()
        assert resp.finally_(on_settled) is None
        on_settled.assert_called_once_with()
        assert stream.closed is True
        assert resp.body_used is True

    def test_finally_on_error(self):
        on_settled = MagicMock()
        resp = make_error()
        resp.finally_(on_settled)
        on_settled.assert_called_once_with()
        assert resp.body_used is True

    @pytest.mark.parametrize("reader", ["text", "json", "blob", "array_buffer", "form_data"])
    def test_read_after_finally_raises(self, reader):
        resp = make_response(b"data")
        resp.finally_()
        with pytest.raises(BodyUsedError):
            getattr(resp, reader)()

    def test_read_after_finally_on_error_raises_response_error(self):
        resp = make_error()
        resp.finally_()
        with pytest.raises(ResponseError) as exc_info:
            resp.text()
        assert exc_info.value.response is resp

    def test_done_with_list(self):
        resp = make_response()
        result = resp.done([lambda r: 1, lambda v: v + 1])
        assert result is resp
        assert resp.value == 2

    def test_done_single(self):
        assert make_response().done(lambda r: "x").value == "x"

    def test_fail_with_list(self):
        resp = make_error(reason="boom")
        assert resp.fail([lambda r: r + "!", lambda r: r + "?"]) is resp
        assert resp.reason == "boom!?"

    def test_always_runs_all_and_is_terminal(self):
        calls = []
        resp = make_response(b"data")
        result = resp.always([lambda: calls.append(1), lambda: calls.append(2)])
        assert result is None
        assert calls == [1, 2]
        assert resp.body_used is True

    def test_handler_exception_propagates(self):
        def boom(_):
            raise RuntimeError("handler failed")

        with pytest.raises(RuntimeError):
            make_response().then(boom)
