"""
Core HTTP client for the YouGile REST API.

Handles authentication, request/response encoding, status checks, and error handling.
"""

import json
import logging
import mimetypes
import urllib.error
import urllib.parse
import urllib.request
import uuid
from http import HTTPStatus
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_TIMEOUT = 60
API_PREFIX = "/api-v2"


class CLIError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class APIError(CLIError):
    """API error with status code and message."""

    def __init__(self, message: str, status: int = 0, details: dict | None = None):
        super().__init__(message, details)
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


def status_text(code: int) -> str:
    """Render a status code the way HTTP status lines do, e.g. ``401 Unauthorized``."""
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


class Response:
    """Status code plus decoded JSON body (``None`` when the body is empty)."""

    def __init__(self, status: int, data: Any = None):
        self.status = status
        self.data = data


class APIClient:
    """
    Low-level HTTP client for the YouGile API.

    Handles:
    - Bearer authentication via API key
    - HTTP methods (GET, POST, PUT, DELETE) and multipart uploads
    - Expected-status checks, mapped to "<operation>: HTTP <status>" errors
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the API client.

        Args:
            base_url: API host, e.g. https://ru.yougile.com (trailing slash ignored)
            api_key: Bearer key; required only for authenticated calls
            timeout: Request timeout in seconds

        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _ensure_api_key(self) -> str:
        """Ensure API key is configured."""
        if not self.api_key:
            raise ValidationError("api_key not set in config; run 'yougile auth login' first")
        return self.api_key

    def _build_url(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Build full URL from an /api-v2 relative path and optional query params."""
        url = f"{self.base_url}{API_PREFIX}{path}"
        if params:
            # Filter out None values and URL-encode
            filtered = {k: _query_value(v) for k, v in params.items() if v is not None}
            if filtered:
                url = f"{url}?{urllib.parse.urlencode(filtered)}"
        return url

    def request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        params: dict[str, Any] | None = None,
        data: Any = None,
        body: bytes | None = None,
        content_type: str = "application/json",
        expected: int = 200,
        auth: bool = True,
    ) -> Response:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API path below /api-v2 (e.g., /tasks/{id})
            operation: Human label used as the error prefix (e.g., "get task")
            params: Query parameters; None values are dropped
            data: JSON-serializable request body
            body: Pre-encoded request body (used for multipart uploads)
            content_type: Content-Type for ``body``
            expected: The only status code treated as success
            auth: Attach the bearer token

        Returns:
            Response with status and decoded JSON (None for an empty body)

        Raises:
            ValidationError: When ``auth`` is set but no API key is configured
            APIError: On transport errors, unexpected status, or undecodable JSON

        """
        url = self._build_url(path, params)
        headers = {"Accept": "application/json"}
        if auth:
            headers["Authorization"] = f"Bearer {self._ensure_api_key()}"

        if body is None and data is not None:
            body = json.dumps(data).encode("utf-8")
        if body is not None:
            headers["Content-Type"] = content_type

        logger.debug("%s %s", method, url)
        try:
            req = urllib.request.Request(url, data=body, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                status = response.status
                raw = response.read().decode("utf-8")

        except urllib.error.HTTPError as e:
            logger.debug("%s %s -> %s", method, url, e.code)
            details: dict[str, Any] = {}
            try:
                error_body = e.read().decode("utf-8")
                parsed = json.loads(error_body) if error_body else None
                if isinstance(parsed, dict):
                    details = parsed
            except (json.JSONDecodeError, UnicodeDecodeError):
                pass
            raise APIError(f"{operation}: HTTP {status_text(e.code)}", status=e.code, details=details)

        except urllib.error.URLError as e:
            raise APIError(f"{operation}: connection error: {e.reason}")

        except TimeoutError:
            raise APIError(f"{operation}: request timed out after {self.timeout} seconds")

        logger.debug("%s %s -> %s", method, url, status)
        if status != expected:
            raise APIError(f"{operation}: HTTP {status_text(status)}", status=status)

        if not raw.strip():
            return Response(status)
        try:
            return Response(status, json.loads(raw))
        except json.JSONDecodeError as e:
            raise APIError(f"{operation}: invalid JSON response: {e}", status=status)

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, operation: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request and return the decoded body."""
        return self.request("GET", path, operation, params=params).data

    def post(
        self,
        path: str,
        operation: str,
        data: Any = None,
        expected: int = 201,
        auth: bool = True,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a POST request and return the decoded body."""
        return self.request(
            "POST", path, operation, params=params, data=data, expected=expected, auth=auth
        ).data

    def put(self, path: str, operation: str, data: Any = None) -> Any:
        """Make a PUT request and return the decoded body."""
        return self.request("PUT", path, operation, data=data).data

    def delete(self, path: str, operation: str, auth: bool = True) -> Any:
        """Make a DELETE request and return the decoded body."""
        return self.request("DELETE", path, operation, auth=auth).data

    def upload(self, path: str, operation: str, file_path: Path, field: str = "file") -> Any:
        """POST a single file as multipart/form-data."""
        body, content_type = encode_multipart(field, file_path.name, file_path.read_bytes())
        return self.request(
            "POST", path, operation, body=body, content_type=content_type, expected=200
        ).data


def encode_multipart(field: str, filename: str, content: bytes) -> tuple[bytes, str]:
    """Encode one file part as a multipart/form-data body."""
    boundary = uuid.uuid4().hex
    mime = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    safe_name = filename.replace('"', "%22")
    head = (
        f"--{boundary}\r\n"
        f'Content-Disposition: form-data; name="{field}"; filename="{safe_name}"\r\n'
        f"Content-Type: {mime}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
    return head + content + tail, f"multipart/form-data; boundary={boundary}"


def _query_value(value: Any) -> Any:
    # The API expects lowercase booleans in query strings
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
