"""Pytest configuration - loads .env for live tests and serves a scripted fake YouGile API."""

import json
import threading
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs, urlsplit

import pytest
import yaml
from dotenv import load_dotenv

from yougile_cli.cli import main

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

API_KEY = "test-api-key"


# =============================================================================
# Fake API
# =============================================================================


@dataclass
class RecordedRequest:
    """One request as the fake server saw it."""

    method: str
    path: str
    query: dict[str, str]
    headers: dict[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body) if self.body else None


class FakeAPI:
    """
    Local HTTP server answering scripted ``(status, body)`` per method and path.

    Paths are given without the /api-v2 prefix. A body of None sends an empty
    response, a str is sent verbatim, anything else is JSON-encoded. Unscripted
    routes answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[RecordedRequest] = []
        self._server = ThreadingHTTPServer(("127.0.0.1", 0), _make_handler(self))
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    @property
    def base_url(self) -> str:
        host, port = self._server.server_address[:2]
        return f"http://{host}:{port}"

    def route(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, "/api-v2" + path)] = (status, body)

    def calls(self, method: str | None = None, path: str | None = None) -> list[RecordedRequest]:
        return [
            r
            for r in self.requests
            if (method is None or r.method == method) and (path is None or r.path == "/api-v2" + path)
        ]

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._server.shutdown()
        self._server.server_close()


def _make_handler(api: FakeAPI) -> type[BaseHTTPRequestHandler]:
    class Handler(BaseHTTPRequestHandler):
        def _handle(self) -> None:
            split = urlsplit(self.path)
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length else b""
            api.requests.append(
                RecordedRequest(
                    method=self.command,
                    path=split.path,
                    query={k: v[-1] for k, v in parse_qs(split.query).items()},
                    headers={k.lower(): v for k, v in self.headers.items()},
                    body=body,
                )
            )

            status, payload = api.routes.get((self.command, split.path), (404, {"error": "not found"}))
            if payload is None:
                data = b""
            elif isinstance(payload, str):
                data = payload.encode("utf-8")
            else:
                data = json.dumps(payload).encode("utf-8")

            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            if data:
                self.wfile.write(data)

        do_GET = _handle
        do_POST = _handle
        do_PUT = _handle
        do_DELETE = _handle

        def log_message(self, format: str, *args: Any) -> None:
            pass

    return Handler


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_api(monkeypatch):
    """Start a fake API on localhost; requests to it bypass any configured proxy."""
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    api = FakeAPI()
    api.start()
    yield api
    api.stop()


@pytest.fixture
def api_key():
    return API_KEY


@pytest.fixture
def config_file(tmp_path, fake_api, monkeypatch, api_key):
    """A config file pointing at the fake API with a valid key."""
    monkeypatch.delenv("YOUGILE_CONFIG", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"base_url": fake_api.base_url, "api_key": api_key}))
    return path


@dataclass
class CLIResult:
    exit_code: int
    stdout: str
    stderr: str


@pytest.fixture
def cli(capsys):
    """Run ``main`` in-process and capture exit code and output."""

    def run(*args: str) -> CLIResult:
        capsys.readouterr()
        exit_code = 0
        try:
            main(list(args))
        except SystemExit as e:
            exit_code = e.code if isinstance(e.code, int) else 0
        out, err = capsys.readouterr()
        return CLIResult(exit_code=exit_code, stdout=out, stderr=err)

    return run
