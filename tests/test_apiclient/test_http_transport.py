"""Tests for the HTTP transport's request handling and error mapping."""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import Mock

import pytest
import requests

from argo_cli.apiclient.client import RequestContext
from argo_cli.apiclient.transport import HTTPTransport
from argo_cli.core.exceptions import APIError

CTX = RequestContext(headers={"Authorization": "Bearer t"}, timeout=5.0)


def _response(status=200, payload=None, content=b"{}", text="", reason="OK", lines=None):
    response = Mock(spec=requests.Response)
    response.ok = status < 400
    response.status_code = status
    response.content = content
    response.text = text
    response.reason = reason
    response.url = "https://argo:2746/api/v1/x"
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    response.iter_lines.return_value = lines or []
    return response


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def http(session):
    return HTTPTransport("https://argo:2746/base/", session=session)


class TestRequest:
    def test_sends_headers_timeout_and_body(self, http, session):
        session.request.return_value = _response(payload={"ok": True})

        result = http.request(CTX, "POST", "api/v1/workflows/ns", params={"a": "1"}, body={"b": 2})

        assert result == {"ok": True}
        session.request.assert_called_once_with(
            method="POST",
            url="https://argo:2746/base/api/v1/workflows/ns",
            headers={"Authorization": "Bearer t"},
            params={"a": "1"},
            json={"b": 2},
            timeout=5.0,
            stream=False,
        )

    def test_verify_applied_to_session(self, session):
        HTTPTransport("https://argo:2746", verify=False, session=session)
        assert session.verify is False

    def test_empty_body_is_empty_dict(self, http, session):
        session.request.return_value = _response(content=b"")
        assert http.request(CTX, "DELETE", "x") == {}

    def test_invalid_json(self, http, session):
        session.request.return_value = _response(payload=ValueError("Expecting value"), content=b"<html>")

        with pytest.raises(APIError, match="invalid JSON"):
            http.request(CTX, "GET", "x")

    def test_non_object_json(self, http, session):
        session.request.return_value = _response(payload=[1, 2])

        with pytest.raises(APIError, match="expected JSON object"):
            http.request(CTX, "GET", "x")


class TestErrors:
    def test_server_message_and_status(self, http, session):
        response = _response(status=404, payload={"code": 5, "message": "workflow not found"}, reason="Not Found")
        session.request.return_value = response

        with pytest.raises(APIError) as exc_info:
            http.request(CTX, "GET", "x")

        assert exc_info.value.status_code == 404
        assert exc_info.value.not_found
        assert str(exc_info.value) == "workflow not found (HTTP 404)"
        response.close.assert_called_once()

    def test_plain_text_error_body(self, http, session):
        session.request.return_value = _response(
            status=502, payload=ValueError("no json"), text="bad gateway\n", reason="Bad Gateway"
        )

        with pytest.raises(APIError, match="bad gateway"):
            http.request(CTX, "GET", "x")

    def test_falls_back_to_reason(self, http, session):
        session.request.return_value = _response(status=401, payload={}, reason="Unauthorized")

        with pytest.raises(APIError, match="Unauthorized"):
            http.request(CTX, "GET", "x")

    @pytest.mark.parametrize(
        "error, message",
        [
            (requests.Timeout("slow"), "timed out after 5.0 seconds"),
            (requests.ConnectionError("refused"), "could not connect"),
            (requests.TooManyRedirects("loop"), "failed"),
        ],
    )
    def test_requests_exceptions_mapped(self, http, session, error, message):
        session.request.side_effect = error

        with pytest.raises(APIError, match=message) as exc_info:
            http.request(CTX, "GET", "x")

        assert exc_info.value.url == "https://argo:2746/base/x"
        assert exc_info.value.__cause__ is error


class TestStream:
    def test_yields_results(self, http, session):
        response = _response(lines=['{"result": {"content": "a"}}', "", '{"result": {"content": "b"}}'])
        session.request.return_value = response

        results = list(http.stream(CTX, "api/v1/workflows/ns/wf/log", params={"logOptions.container": "main"}))

        assert results == [{"content": "a"}, {"content": "b"}]
        assert session.request.call_args.kwargs["stream"] is True
        assert session.request.call_args.kwargs["timeout"] == 5.0
        response.iter_lines.assert_called_once_with(chunk_size=None, decode_unicode=True)
        response.close.assert_called_once()

    def test_follow_has_no_read_timeout(self, http, session):
        session.request.return_value = _response(lines=['{"result": {"content": "a"}}'])

        assert list(http.stream(CTX, "log", follow=True)) == [{"content": "a"}]
        assert session.request.call_args.kwargs["timeout"] == (5.0, None)

    def test_error_event(self, http, session):
        session.request.return_value = _response(
            lines=['{"result": {"content": "a"}}', '{"error": {"message": "pod gone"}}']
        )

        stream = http.stream(CTX, "log")
        assert next(stream) == {"content": "a"}
        with pytest.raises(APIError, match="pod gone"):
            next(stream)

    def test_malformed_event(self, http, session):
        session.request.return_value = _response(lines=["not json"])

        with pytest.raises(APIError, match="invalid event"):
            list(http.stream(CTX, "log"))

    def test_interrupted_stream(self, http, session):
        response = _response()
        response.iter_lines.side_effect = requests.ConnectionError("reset")
        session.request.return_value = response

        with pytest.raises(APIError, match="interrupted"):
            list(http.stream(CTX, "log"))


def test_close_closes_session(http, session):
    http.close()
    session.close.assert_called_once()


class _SlowLogHandler(BaseHTTPRequestHandler):
    """Streams one log line, stays idle for longer than the client timeout, then sends another."""

    protocol_version = "HTTP/1.1"
    pause = 1.5

    def _chunk(self, data: bytes) -> None:
        self.wfile.write(f"{len(data):X}\r\n".encode() + data + b"\r\n")
        self.wfile.flush()

    def do_GET(self):
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Transfer-Encoding", "chunked")
        self.send_header("Connection", "close")
        self.end_headers()
        self._chunk(b'{"result": {"podName": "wf-1", "content": "first"}}\n')
        time.sleep(self.pause)
        self._chunk(b'{"result": {"podName": "wf-1", "content": "second"}}\n')
        self.wfile.write(b"0\r\n\r\n")
        self.wfile.flush()

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_log_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SlowLogHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


class TestFollowAgainstServer:
    def test_idle_followed_stream_keeps_reading(self, slow_log_server):
        http = HTTPTransport(slow_log_server)
        ctx = RequestContext(timeout=0.5)

        contents = [entry["content"] for entry in http.stream(ctx, "api/v1/workflows/ns/wf/log", follow=True)]

        http.close()
        assert contents == ["first", "second"]

    def test_lines_arrive_before_stream_ends(self, slow_log_server):
        http = HTTPTransport(slow_log_server)
        stream = http.stream(RequestContext(timeout=5.0), "log", follow=True)

        started = time.monotonic()
        first = next(stream)

        assert first["content"] == "first"
        assert time.monotonic() - started < _SlowLogHandler.pause
        assert next(stream)["content"] == "second"
        http.close()

    def test_unfollowed_stream_still_times_out(self, slow_log_server):
        http = HTTPTransport(slow_log_server)
        stream = http.stream(RequestContext(timeout=0.5), "log")

        assert next(stream)["content"] == "first"
        with pytest.raises(APIError, match="interrupted"):
            next(stream)
        http.close()
