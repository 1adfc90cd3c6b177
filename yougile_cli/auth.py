"""
Email/password login: resolve the company, then mint an API key for it.
"""

import logging

from yougile_cli.core.client import DEFAULT_TIMEOUT, APIClient, APIError
from yougile_cli.core.types import Company

logger = logging.getLogger(__name__)


def login(
    base_url: str,
    email: str,
    password: str,
    company_id: str | None = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> str:
    """
    Obtain an API key using email and password.

    Lists the account's companies, picks one (company_id if given, otherwise the
    first returned), then creates a key scoped to it. Nothing is persisted here.

    Args:
        base_url: YouGile API host, e.g. https://ru.yougile.com
        email: Account login
        password: Account password
        company_id: Company to log into; defaults to the first one listed
        timeout: Request timeout in seconds

    Returns:
        The new API key

    Raises:
        APIError: If either call fails or returns an unexpected status, no company
            matches, or the key is missing from the response

    """
    client = APIClient(base_url, timeout=timeout)
    credentials = {"login": email, "password": password}

    result = client.post("/auth/companies", "get companies", credentials, expected=200, auth=False)
    content = (result.get("content") if isinstance(result, dict) else None) or []
    if not content:
        raise APIError("no companies found for this account")
    if not all(isinstance(c, dict) and c.get("id") for c in content):
        raise APIError("get companies: empty response")
    companies = [Company.from_dict(c) for c in content]

    if company_id:
        matches = [c for c in companies if c.id == company_id]
        if not matches:
            raise APIError(f"company {company_id} not found for this account")
        company = matches[0]
    else:
        company = companies[0]
        if len(companies) > 1:
            logger.warning(
                "account has %d companies, using %s (%s); pass --company-id to choose",
                len(companies),
                company.name,
                company.id,
            )

    created = client.post("/auth/keys", "create key", {**credentials, "companyId": company.id}, auth=False)
    key = created.get("key") if isinstance(created, dict) else None
    if not key:
        raise APIError("create key: empty key in response")

    logger.debug("created API key for company %s", company.id)
    return key
