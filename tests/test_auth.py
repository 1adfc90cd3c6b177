"""Email/password login flow."""

import logging

import pytest

from yougile_cli.auth import login
from yougile_cli.core.client import APIError

COMPANIES = {
    "paging": {"count": 2},
    "content": [{"id": "c1", "name": "Acme"}, {"id": "c2", "name": "Beta"}],
}


def test_login_returns_key(fake_api):
    fake_api.route("POST", "/auth/companies", 200, {"content": [{"id": "c1", "name": "Acme"}]})
    fake_api.route("POST", "/auth/keys", 201, {"key": "k-123"})

    assert login(fake_api.base_url, "me@example.com", "secret") == "k-123"

    companies, keys = fake_api.requests
    assert companies.path == "/api-v2/auth/companies"
    assert companies.json() == {"login": "me@example.com", "password": "secret"}
    assert keys.path == "/api-v2/auth/keys"
    assert keys.json() == {"login": "me@example.com", "password": "secret", "companyId": "c1"}
    assert "authorization" not in companies.headers
    assert "authorization" not in keys.headers


def test_bad_credentials(fake_api):
    fake_api.route("POST", "/auth/companies", 401, {"error": "unauthorized"})

    with pytest.raises(APIError) as exc:
        login(fake_api.base_url, "me@example.com", "wrong")

    assert exc.value.message == "get companies: HTTP 401 Unauthorized"
    assert exc.value.status == 401
    assert len(fake_api.requests) == 1


def test_no_companies(fake_api):
    fake_api.route("POST", "/auth/companies", 200, {"content": []})

    with pytest.raises(APIError, match="no companies found for this account"):
        login(fake_api.base_url, "me@example.com", "secret")

    assert fake_api.calls("POST", "/auth/keys") == []


def test_first_company_used_with_warning(fake_api, caplog):
    fake_api.route("POST", "/auth/companies", 200, COMPANIES)
    fake_api.route("POST", "/auth/keys", 201, {"key": "k"})

    with caplog.at_level(logging.WARNING, logger="yougile_cli.auth"):
        login(fake_api.base_url, "me@example.com", "secret")

    assert fake_api.calls("POST", "/auth/keys")[0].json()["companyId"] == "c1"
    assert "account has 2 companies" in caplog.text


def test_company_id_selects_company(fake_api):
    fake_api.route("POST", "/auth/companies", 200, COMPANIES)
    fake_api.route("POST", "/auth/keys", 201, {"key": "k"})

    login(fake_api.base_url, "me@example.com", "secret", company_id="c2")

    assert fake_api.calls("POST", "/auth/keys")[0].json()["companyId"] == "c2"


def test_unknown_company_id(fake_api):
    fake_api.route("POST", "/auth/companies", 200, COMPANIES)

    with pytest.raises(APIError, match="company c9 not found"):
        login(fake_api.base_url, "me@example.com", "secret", company_id="c9")

    assert fake_api.calls("POST", "/auth/keys") == []


def test_empty_key(fake_api):
    fake_api.route("POST", "/auth/companies", 200, {"content": [{"id": "c1"}]})
    fake_api.route("POST", "/auth/keys", 201, {"key": ""})

    with pytest.raises(APIError, match="create key: empty key in response"):
        login(fake_api.base_url, "me@example.com", "secret")


def test_key_endpoint_must_return_created(fake_api):
    fake_api.route("POST", "/auth/companies", 200, {"content": [{"id": "c1"}]})
    fake_api.route("POST", "/auth/keys", 200, {"key": "k"})

    with pytest.raises(APIError, match=r"^create key: HTTP 200 OK$"):
        login(fake_api.base_url, "me@example.com", "secret")


def test_company_without_id(fake_api):
    fake_api.route("POST", "/auth/companies", 200, {"content": [{"name": "Acme"}]})

    with pytest.raises(APIError, match=r"^get companies: empty response$"):
        login(fake_api.base_url, "me@example.com", "secret")

    assert fake_api.calls("POST", "/auth/keys") == []
