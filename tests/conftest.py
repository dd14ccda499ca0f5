"""Shared fixtures for the textrazor tests.

This file provides:
- FakeResponse / make_response: stand-ins for urllib responses, for patching TextRazorConnection._open
- StubTextRazorServer: an in-process HTTP server speaking enough of the TextRazor API for round trips
"""

import gzip
import json
import socket
import threading
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock
from urllib.parse import parse_qsl, unquote, urlsplit

import pytest

import textrazor


class FakeResponse(object):
    """Minimal urllib response: status, headers, a body and the context manager protocol."""

    def __init__(self, status=200, body=b"{}", headers=None):
        self.status = status
        self.headers = headers or {}
        self._body = body
        self.closed = False

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True
        return False


def make_response(json_body=None, status=200, headers=None):
    """Create a FakeResponse carrying json_body encoded as JSON."""
    if json_body is None:
        json_body = {"ok": True}
    return FakeResponse(status=status, body=json.dumps(json_body).encode("utf-8"), headers=headers)


def free_port():
    """Returns a localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class RecordedRequest(object):

    def __init__(self, method, path, headers, body):
        self.method = method
        self.path = path
        self.headers = headers
        self.body = body

    def form_params(self):
        return parse_qsl(self.body.decode("utf-8"), keep_blank_values=True)

    def json(self):
        return json.loads(self.body.decode("utf-8"))


class _StubHandler(BaseHTTPRequestHandler):

    def __init__(self, stub, *args, **kwargs):
        self.stub = stub
        super(_StubHandler, self).__init__(*args, **kwargs)

    def log_message(self, format, *args):
        pass

    def do_GET(self):
        self._handle()

    def do_POST(self):
        self._handle()

    def do_PUT(self):
        self._handle()

    def do_DELETE(self):
        self._handle()

    def _handle(self):
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else b""

        request = RecordedRequest(self.command, self.path, self.headers, body)
        self.stub.requests.append(request)

        if self.stub.delay:
            self.stub.release.wait(self.stub.delay)

        extra_headers, self.stub.next_headers = self.stub.next_headers, {}
        status, payload = self.stub.route(request)
        raw = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")

        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        for name, value in extra_headers.items():
            self.send_header(name, value)

        if self.stub.gzip_responses and "gzip" in (request.headers.get("Accept-Encoding") or ""):
            raw = gzip.compress(raw)
            self.send_header("Content-Encoding", "gzip")

        self.send_header("Content-Length", str(len(raw)))
        self.end_headers()

        try:
            self.wfile.write(raw)
        except (BrokenPipeError, ConnectionResetError):
            pass


class StubTextRazorServer(object):
    """Serves a tiny in-memory version of the TextRazor API on localhost.

    POST /                      echoes the decoded form params back under response.params
    POST /entities/{id}/        stores dictionary entries
    GET  /entities/{id}/{entry} returns a stored entry, or 404
    anything else               {"ok": true, "method": ..., "path": ...}

    Set ``next_status``/``next_payload`` (and optionally ``next_headers``) to force the next response.
    """

    def __init__(self):
        self.requests = []
        self.entries = {}
        self.gzip_responses = False
        self.delay = 0
        self.release = threading.Event()
        self.next_status = None
        self.next_payload = None
        self.next_headers = {}

        self._server = ThreadingHTTPServer(("127.0.0.1", 0), partial(_StubHandler, self))
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def endpoint(self):
        return "http://127.0.0.1:%d/" % self._server.server_address[1]

    def settings(self, **overrides):
        options = dict(api_key="test-key", endpoint=self.endpoint, do_encryption=False,
                       connect_timeout_seconds=5, timeout_seconds=5)
        options.update(overrides)
        return textrazor.TextRazorSettings(**options)

    def start(self):
        self._thread.start()

    def stop(self):
        self.release.set()
        self._server.shutdown()
        self._server.server_close()
        self._thread.join(5)

    def route(self, request):
        if self.next_status is not None:
            status, payload = self.next_status, self.next_payload
            self.next_status = self.next_payload = None
            return status, payload

        path = urlsplit(request.path).path
        segments = [unquote(segment) for segment in path.strip("/").split("/") if segment]

        if request.method == "POST" and not segments:
            return 200, {"ok": True, "response": {"params": request.form_params()}}

        if segments[:1] == ["entities"] and len(segments) == 2 and request.method == "POST":
            stored = self.entries.setdefault(segments[1], {})
            for number, entry in enumerate(request.json()):
                entry = dict(entry)
                entry.setdefault("id", "entry-%d" % (len(stored) + number))
                stored[entry["id"]] = entry
            return 200, {"ok": True}

        if segments[:1] == ["entities"] and len(segments) == 3 and request.method == "GET":
            entry = self.entries.get(segments[1], {}).get(segments[2])
            if entry is None:
                return 404, {"ok": False, "error": "Entry not found: %s" % segments[2]}
            return 200, {"ok": True, "response": entry}

        return 200, {"ok": True, "method": request.method, "path": request.path}


@pytest.fixture(autouse=True)
def no_proxies(monkeypatch):
    """Keeps proxy settings in the environment from rerouting requests to the stub server."""
    for variable in ("http_proxy", "https_proxy", "all_proxy", "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY"):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture
def stub_server():
    server = StubTextRazorServer()
    server.start()
    try:
        yield server
    finally:
        server.stop()


@pytest.fixture
def mock_open(monkeypatch):
    """Patches the transport so no request leaves the process; returns the mock."""
    opener = MagicMock(return_value=make_response())
    monkeypatch.setattr(textrazor.TextRazorConnection, "_open", opener)
    return opener


def sent_request(opener, index=-1):
    """The urllib Request passed to a patched _open."""
    return opener.call_args_list[index][0][0]
