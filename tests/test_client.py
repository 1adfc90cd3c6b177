"""Core HTTP client and SDK response handling."""

import socket

import pytest

from yougile_cli.core.client import APIClient, APIError, ValidationError, encode_multipart, status_text
from yougile_cli.sdk import YouGileClient


def closed_port_url() -> str:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"http://127.0.0.1:{port}"


class TestAPIClient:
    def test_base_url_trailing_slash(self, fake_api):
        fake_api.route("GET", "/companies", 200, {"id": "c1"})
        client = APIClient(fake_api.base_url + "/", api_key="k")
        assert client.get("/companies", "get company") == {"id": "c1"}
        assert fake_api.requests[0].path == "/api-v2/companies"

    def test_query_encoding(self, fake_api):
        fake_api.route("GET", "/webhooks", 200, [])
        APIClient(fake_api.base_url, api_key="k").get(
            "/webhooks",
            "list webhooks",
            {"includeDeleted": True, "title": "a b", "skip": None},
        )
        assert fake_api.requests[0].query == {"includeDeleted": "true", "title": "a b"}

    def test_auth_required(self, fake_api):
        with pytest.raises(ValidationError, match="api_key not set"):
            APIClient(fake_api.base_url).get("/companies", "get company")
        assert fake_api.requests == []

    def test_error_details_from_body(self, fake_api):
        fake_api.route("GET", "/tasks/t1", 403, {"error": "forbidden", "statusCode": 403})
        with pytest.raises(APIError) as exc:
            APIClient(fake_api.base_url, api_key="k").get("/tasks/t1", "get task")
        assert exc.value.to_dict() == {
            "error": "get task: HTTP 403 Forbidden",
            "details": {"error": "forbidden", "statusCode": 403},
            "status": 403,
        }

    def test_connection_error(self):
        client = APIClient(closed_port_url(), api_key="k", timeout=5)
        with pytest.raises(APIError, match="^list projects: connection error:"):
            client.get("/projects", "list projects")

    def test_empty_body_is_none(self, fake_api):
        fake_api.route("DELETE", "/auth/keys/k1", 200, None)
        assert APIClient(fake_api.base_url).delete("/auth/keys/k1", "delete key", auth=False) is None


def test_status_text():
    assert status_text(404) == "404 Not Found"
    assert status_text(599) == "599"


def test_encode_multipart():
    body, content_type = encode_multipart("file", "notes.txt", b"hello")
    boundary = content_type.split("boundary=", 1)[1]
    assert content_type.startswith("multipart/form-data; ")
    assert body.startswith(f"--{boundary}\r\n".encode())
    assert b'Content-Disposition: form-data; name="file"; filename="notes.txt"' in body
    assert b"Content-Type: text/plain" in body
    assert body.endswith(f"hello\r\n--{boundary}--\r\n".encode())


class TestSDK:
    def test_paginated_response(self, fake_api):
        fake_api.route(
            "GET",
            "/boards",
            200,
            {
                "paging": {"count": 3, "limit": 2, "offset": 0, "next": True},
                "content": [{"id": "b1", "title": "Dev", "projectId": "p1"}, {"id": "b2", "title": "Ops"}],
            },
        )
        page = YouGileClient(fake_api.base_url, "k").boards.list(limit=2)
        assert [b.id for b in page.data] == ["b1", "b2"]
        assert page.data[0].project_id == "p1"
        assert page.offset == 0
        assert page.has_more

    def test_list_requires_paging_envelope(self, fake_api):
        fake_api.route("GET", "/projects", 200, [{"id": "p1"}])
        with pytest.raises(APIError, match="list projects: unexpected response shape"):
            YouGileClient(fake_api.base_url, "k").projects.list()

    def test_list_keys_requires_list(self, fake_api):
        fake_api.route("POST", "/auth/keys/get", 200, {"content": []})
        with pytest.raises(APIError, match="list keys: unexpected response shape"):
            YouGileClient(fake_api.base_url).auth.list_keys("a@b.c", "pw")

    def test_create_requires_id(self, fake_api):
        fake_api.route("POST", "/tasks", 201, {})
        with pytest.raises(APIError, match="create task: empty response"):
            YouGileClient(fake_api.base_url, "k").tasks.create("New")

    def test_sticker_paths(self, fake_api):
        fake_api.route("GET", "/sprint-stickers/s1/states/st1", 200, {"id": "st1", "name": "Week 1"})
        state = YouGileClient(fake_api.base_url, "k").sprint_stickers.get_state("s1", "st1")
        assert state.name == "Week 1"

    def test_upload_requires_object(self, fake_api, tmp_path):
        fake_api.route("POST", "/upload-file", 200, ["not", "an", "object"])
        source = tmp_path / "a.txt"
        source.write_text("x")
        with pytest.raises(APIError, match=r"^upload: empty response$"):
            YouGileClient(fake_api.base_url, "k").files.upload(source)

    def test_chat_subscribers_require_list(self, fake_api):
        fake_api.route("GET", "/tasks/t1/chat-subscribers", 200, {"content": ["u1"]})
        with pytest.raises(APIError, match="get chat subscribers: unexpected response shape"):
            YouGileClient(fake_api.base_url, "k").tasks.chat_subscribers("t1")
