"""
YouGile SDK - High-level client with nice ergonomics.

This layer provides a clean, typed interface for YouGile operations.
Built on top of the core APIClient.
"""

import builtins
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from yougile_cli.core.client import DEFAULT_TIMEOUT, APIClient, APIError
from yougile_cli.core.types import (
    AuthKey,
    Board,
    ChatMessage,
    Column,
    Company,
    Department,
    GroupChat,
    PaginatedResponse,
    Project,
    Sticker,
    StickerState,
    Task,
    UploadedFile,
    User,
)

T = TypeVar("T")


class YouGileClient:
    """
    High-level YouGile API client with typed methods.

    Example:
        client = YouGileClient("https://ru.yougile.com", api_key)

        page = client.tasks.list(column_id=column_id, limit=20)
        created = client.tasks.create("Write release notes", column_id=column_id)
        client.tasks.update(created["id"], title="Write release notes v2")

    """

    def __init__(self, base_url: str, api_key: str | None = None, timeout: int = DEFAULT_TIMEOUT):
        """
        Initialize the YouGile client.

        Args:
            base_url: API host, e.g. https://ru.yougile.com
            api_key: Bearer key (not needed for the credential-based auth calls)
            timeout: Request timeout in seconds

        """
        self._client = APIClient(base_url, api_key=api_key, timeout=timeout)

        # Sub-clients for different domains
        self.auth = AuthOperations(self._client)
        self.company = CompanyOperations(self._client)
        self.users = UserOperations(self._client)
        self.projects = ProjectOperations(self._client)
        self.boards = BoardOperations(self._client)
        self.columns = ColumnOperations(self._client)
        self.tasks = TaskOperations(self._client)
        self.departments = DepartmentOperations(self._client)
        self.webhooks = WebhookOperations(self._client)
        self.files = FileOperations(self._client)
        self.chats = ChatOperations(self._client)
        self.string_stickers = StickerOperations(self._client, "/string-stickers", "string sticker")
        self.sprint_stickers = StickerOperations(self._client, "/sprint-stickers", "sprint sticker")
        self.crm = CrmOperations(self._client)

    @property
    def base_url(self) -> str:
        """Get the API base URL."""
        return self._client.base_url


# =============================================================================
# Helpers
# =============================================================================


def _page_params(limit: int = 0, offset: int = 0, **filters: Any) -> dict[str, Any]:
    """Query params for a list call: limit/offset only when positive, filters only when set."""
    params: dict[str, Any] = {}
    if limit > 0:
        params["limit"] = limit
    if offset > 0:
        params["offset"] = offset
    for key, value in filters.items():
        if value:
            params[key] = value
    return params


def _require(result: Any, operation: str) -> Any:
    """Reject an empty success body."""
    if result is None:
        raise APIError(f"{operation}: empty response")
    return result


def _object(result: Any, operation: str) -> dict[str, Any]:
    """Reject a success body that is not a JSON object."""
    if not isinstance(result, dict):
        raise APIError(f"{operation}: empty response")
    return result


def _record(result: Any, operation: str) -> dict[str, Any]:
    """Reject a success body that is not an object carrying an id."""
    if _object(result, operation).get("id") in (None, ""):
        raise APIError(f"{operation}: empty response")
    return result


def _paginated(result: Any, parser: Callable[[dict[str, Any]], T], operation: str) -> PaginatedResponse[T]:
    """Parse a ``{"paging", "content"}`` response."""
    result = _require(result, operation)
    if not isinstance(result, dict):
        raise APIError(f"{operation}: unexpected response shape")
    content = result.get("content") or []
    paging = result.get("paging")
    if not isinstance(paging, dict):
        paging = {}
    return PaginatedResponse(
        data=[parser(_record(item, operation)) for item in content],
        offset=int(paging.get("offset") or 0),
        next=bool(paging.get("next")),
        raw=result,
    )


def _created_id(result: Any, operation: str) -> str:
    """Extract the id from a ``{"id": ...}`` create response."""
    return str(_record(result, operation)["id"])


def _drop_none(body: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in body.items() if v is not None}


# =============================================================================
# Auth Operations (email + password, no API key)
# =============================================================================


class AuthOperations:
    """Credential-based operations for companies and API keys."""

    def __init__(self, client: APIClient):
        self._client = client

    def companies(self, email: str, password: str, limit: int = 0, offset: int = 0) -> PaginatedResponse[Company]:
        """
        List the companies an account belongs to.

        Args:
            email: Account login
            password: Account password
            limit: Maximum number of results (0 for the API default)
            offset: Pagination offset

        Returns:
            PaginatedResponse containing Companies

        """
        result = self._client.post(
            "/auth/companies",
            "get companies",
            {"login": email, "password": password},
            expected=200,
            auth=False,
            params=_page_params(limit, offset),
        )
        return _paginated(result, Company.from_dict, "get companies")

    def list_keys(self, email: str, password: str, company_id: str | None = None) -> builtins.list[AuthKey]:
        """List API keys, optionally for one company."""
        body = _drop_none({"login": email, "password": password, "companyId": company_id or None})
        result = self._client.post("/auth/keys/get", "list keys", body, expected=200, auth=False)
        result = _require(result, "list keys")
        if not isinstance(result, builtins.list):
            raise APIError("list keys: unexpected response shape")
        return [AuthKey.from_dict(_object(k, "list keys")) for k in result]

    def create_key(self, email: str, password: str, company_id: str) -> AuthKey:
        """Create an API key for a company."""
        body = {"login": email, "password": password, "companyId": company_id}
        result = self._client.post("/auth/keys", "create key", body, auth=False)
        return AuthKey.from_dict(_object(result, "create key"))

    def delete_key(self, key: str) -> None:
        """Delete an API key by its value."""
        self._client.delete(f"/auth/keys/{key}", "delete key", auth=False)


# =============================================================================
# Company / Users / Departments
# =============================================================================


class CompanyOperations:
    """Operations on the company the API key belongs to."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self) -> dict[str, Any]:
        """Get current company details."""
        return _object(self._client.get("/companies", "get company"), "get company")


class UserOperations:
    """Operations for company employees."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        email: str | None = None,
        project_id: str | None = None,
    ) -> PaginatedResponse[User]:
        """
        List users.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            email: Filter by email
            project_id: Only users participating in this project

        Returns:
            PaginatedResponse containing Users

        """
        params = _page_params(limit, offset, email=email, projectId=project_id)
        return _paginated(self._client.get("/users", "list users", params), User.from_dict, "list users")

    def get(self, user_id: str) -> User:
        """Get a user by ID."""
        return User.from_dict(_record(self._client.get(f"/users/{user_id}", "get user"), "get user"))


class DepartmentOperations:
    """Operations for departments."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        title: str | None = None,
        parent_id: str | None = None,
    ) -> PaginatedResponse[Department]:
        """List departments, optionally filtered by title or parent."""
        params = _page_params(limit, offset, title=title, parentId=parent_id)
        result = self._client.get("/departments", "list departments", params)
        return _paginated(result, Department.from_dict, "list departments")

    def get(self, department_id: str) -> Department:
        """Get a department by ID."""
        result = self._client.get(f"/departments/{department_id}", "get department")
        return Department.from_dict(_record(result, "get department"))


# =============================================================================
# Projects / Boards / Columns
# =============================================================================


class ProjectOperations:
    """Operations for managing projects."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self, limit: int = 50, offset: int = 0, title: str | None = None) -> PaginatedResponse[Project]:
        """
        List projects.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            title: Filter by title

        Returns:
            PaginatedResponse containing Projects

        """
        params = _page_params(limit, offset, title=title)
        result = self._client.get("/projects", "list projects", params)
        return _paginated(result, Project.from_dict, "list projects")

    def get(self, project_id: str) -> Project:
        """Get a project by ID."""
        result = self._client.get(f"/projects/{project_id}", "get project")
        return Project.from_dict(_record(result, "get project"))


class BoardOperations:
    """Operations for managing boards."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        title: str | None = None,
        project_id: str | None = None,
    ) -> PaginatedResponse[Board]:
        """List boards, optionally filtered by title or project."""
        params = _page_params(limit, offset, title=title, projectId=project_id)
        result = self._client.get("/boards", "list boards", params)
        return _paginated(result, Board.from_dict, "list boards")

    def get(self, board_id: str) -> Board:
        """Get a board by ID."""
        return Board.from_dict(_record(self._client.get(f"/boards/{board_id}", "get board"), "get board"))


class ColumnOperations:
    """Operations for managing board columns."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        title: str | None = None,
        board_id: str | None = None,
    ) -> PaginatedResponse[Column]:
        """List columns, optionally filtered by title or board."""
        params = _page_params(limit, offset, title=title, boardId=board_id)
        result = self._client.get("/columns", "list columns", params)
        return _paginated(result, Column.from_dict, "list columns")

    def get(self, column_id: str) -> Column:
        """Get a column by ID."""
        return Column.from_dict(_record(self._client.get(f"/columns/{column_id}", "get column"), "get column"))


# =============================================================================
# Task Operations
# =============================================================================


class TaskOperations:
    """Operations for managing tasks."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(
        self,
        limit: int = 50,
        offset: int = 0,
        title: str | None = None,
        column_id: str | None = None,
    ) -> PaginatedResponse[Task]:
        """
        List tasks.

        Args:
            limit: Maximum number of results
            offset: Pagination offset
            title: Filter by title
            column_id: Only tasks in this column

        Returns:
            PaginatedResponse containing Tasks

        """
        params = _page_params(limit, offset, title=title, columnId=column_id)
        result = self._client.get("/task-list", "list tasks", params)
        return _paginated(result, Task.from_dict, "list tasks")

    def get(self, task_id: str) -> Task:
        """Get a task by ID."""
        return Task.from_dict(_record(self._client.get(f"/tasks/{task_id}", "get task"), "get task"))

    def create(self, title: str, column_id: str | None = None) -> dict[str, Any]:
        """
        Create a task.

        Args:
            title: Task title
            column_id: Column to place the task in

        Returns:
            The create response (``{"id": ...}``)

        """
        body = _drop_none({"title": title, "columnId": column_id or None})
        result = self._client.post("/tasks", "create task", body)
        _created_id(result, "create task")
        return result

    def update(self, task_id: str, title: str | None = None, column_id: str | None = None) -> Any:
        """Update a task. Only the given fields are sent; a new column_id moves the task."""
        body = _drop_none({"title": title, "columnId": column_id})
        return self._client.put(f"/tasks/{task_id}", "update task", body)

    def chat_subscribers(self, task_id: str) -> builtins.list[str]:
        """Get the user IDs subscribed to a task's chat."""
        result = self._client.get(f"/tasks/{task_id}/chat-subscribers", "get chat subscribers")
        result = _require(result, "get chat subscribers")
        if not isinstance(result, builtins.list):
            raise APIError("get chat subscribers: unexpected response shape")
        return [str(user_id) for user_id in result]

    def set_chat_subscribers(self, task_id: str, user_ids: builtins.list[str]) -> Any:
        """Replace the task chat subscribers."""
        return self._client.put(
            f"/tasks/{task_id}/chat-subscribers",
            "update chat subscribers",
            {"content": user_ids},
        )


# =============================================================================
# Webhooks / Files
# =============================================================================


class WebhookOperations:
    """Operations for webhook subscriptions."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self, include_deleted: bool = False) -> Any:
        """List webhooks; returns the raw payload (None when the API sends no body)."""
        params = {"includeDeleted": True} if include_deleted else None
        return self._client.get("/webhooks", "list webhooks", params)


class FileOperations:
    """File upload operations."""

    def __init__(self, client: APIClient):
        self._client = client

    def upload(self, path: Path) -> UploadedFile:
        """
        Upload a file.

        Args:
            path: Local file path

        Returns:
            UploadedFile with the relative and full URL

        """
        result = self._client.upload("/upload-file", "upload", path)
        return UploadedFile.from_dict(_object(result, "upload"))


# =============================================================================
# Chat Operations
# =============================================================================


class ChatOperations:
    """Operations for group chats and chat messages."""

    def __init__(self, client: APIClient):
        self._client = client

    def list(self, limit: int = 50, offset: int = 0, title: str | None = None) -> PaginatedResponse[GroupChat]:
        """List group chats."""
        params = _page_params(limit, offset, title=title)
        result = self._client.get("/group-chats", "list chats", params)
        return _paginated(result, GroupChat.from_dict, "list chats")

    def get(self, chat_id: str) -> GroupChat:
        """Get a group chat by ID."""
        return GroupChat.from_dict(_record(self._client.get(f"/group-chats/{chat_id}", "get chat"), "get chat"))

    def messages(self, chat_id: str, limit: int = 50, offset: int = 0) -> PaginatedResponse[ChatMessage]:
        """List messages in a chat (task or group chat)."""
        result = self._client.get(f"/chats/{chat_id}/messages", "list messages", _page_params(limit, offset))
        return _paginated(result, ChatMessage.from_dict, "list messages")

    def send(self, chat_id: str, text: str, label: str = "") -> Any:
        """
        Send a plain-text message.

        Args:
            chat_id: Chat ID
            text: Message text; also sent as the HTML body
            label: Optional quick-link label

        Returns:
            The create response (``{"id": <timestamp>}``)

        """
        body = {"text": text, "textHtml": text, "label": label}
        return self._client.post(f"/chats/{chat_id}/messages", "send message", body)


# =============================================================================
# Sticker Operations
# =============================================================================


class StickerOperations:
    """Operations for string or sprint stickers and their states."""

    def __init__(self, client: APIClient, base_path: str, kind: str):
        self._client = client
        self._base = base_path
        self.kind = kind

    def list(self, include_deleted: bool = False, limit: int = 0, offset: int = 0) -> PaginatedResponse[Sticker]:
        """List stickers."""
        op = f"list {self.kind}s"
        params = _page_params(limit, offset, includeDeleted=include_deleted)
        return _paginated(self._client.get(self._base, op, params), lambda s: _sticker(s, op), op)

    def get(self, sticker_id: str) -> Sticker:
        """Get a sticker (including its states) by ID."""
        op = f"get {self.kind}"
        return _sticker(_record(self._client.get(f"{self._base}/{sticker_id}", op), op), op)

    def create(self, name: str) -> dict[str, Any]:
        """Create a sticker."""
        op = f"create {self.kind}"
        result = self._client.post(self._base, op, {"name": name})
        _created_id(result, op)
        return result

    def update(self, sticker_id: str, name: str | None = None) -> Any:
        """Update a sticker. Only the given fields are sent."""
        return self._client.put(f"{self._base}/{sticker_id}", f"update {self.kind}", _drop_none({"name": name}))

    def get_state(self, sticker_id: str, state_id: str) -> StickerState:
        """Get one state of a sticker."""
        op = f"get {self.kind} state"
        result = self._client.get(f"{self._base}/{sticker_id}/states/{state_id}", op)
        return StickerState.from_dict(_record(result, op))

    def create_state(self, sticker_id: str, name: str) -> dict[str, Any]:
        """Create a state for a sticker."""
        op = f"create {self.kind} state"
        result = self._client.post(f"{self._base}/{sticker_id}/states", op, {"name": name})
        _created_id(result, op)
        return result

    def update_state(self, sticker_id: str, state_id: str, name: str | None = None) -> Any:
        """Update a sticker state. Only the given fields are sent."""
        return self._client.put(
            f"{self._base}/{sticker_id}/states/{state_id}",
            f"update {self.kind} state",
            _drop_none({"name": name}),
        )


def _sticker(data: dict[str, Any], operation: str) -> Sticker:
    states = data.get("states") or []
    if not isinstance(states, builtins.list):
        raise APIError(f"{operation}: unexpected response shape")
    for state in states:
        _record(state, operation)
    return Sticker.from_dict(data)


# =============================================================================
# CRM Operations
# =============================================================================


class CrmOperations:
    """Operations for CRM contacts."""

    def __init__(self, client: APIClient):
        self._client = client

    def create_contact_person(
        self,
        title: str,
        project_id: str,
        fields: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Create a contact person in a CRM project.

        Args:
            title: Contact name
            project_id: CRM project ID
            fields: Optional contact fields (email, phone, address, position, additionalPhone)

        Returns:
            The create response (``{"id": ...}``)

        """
        body: dict[str, Any] = {"title": title, "projectId": project_id}
        fields = {k: v for k, v in (fields or {}).items() if v}
        if fields:
            body["fields"] = fields
        result = self._client.post("/crm/contact-persons", "create contact person", body)
        _created_id(result, "create contact person")
        return result

    def find_by_external_id(self, provider: str, chat_id: str) -> Any:
        """Find a contact by messenger provider and chat ID; None when nothing matches."""
        params = {"provider": provider, "chatId": chat_id}
        return self._client.get("/crm/contacts/by-external-id", "find contact by external id", params)
