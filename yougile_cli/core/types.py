"""
Core types for YouGile API payloads.

These dataclasses provide type safety and IDE support for API responses.
Each keeps the untouched response object in ``raw`` so JSON output stays lossless.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

# =============================================================================
# Pagination
# =============================================================================


T = TypeVar("T")


@dataclass
class PaginatedResponse(Generic[T]):
    """A ``{"paging": {...}, "content": [...]}`` list response."""

    data: list[T]
    offset: int = 0
    next: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def has_more(self) -> bool:
        """Check if there are more results."""
        return self.next


# =============================================================================
# Auth Types
# =============================================================================


@dataclass
class Company:
    """A company (tenant) the account belongs to."""

    id: str
    name: str = ""
    is_admin: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Company":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data.get("name") or data.get("title") or "",
            is_admin=bool(data.get("isAdmin")),
            raw=data,
        )


@dataclass
class AuthKey:
    """An API key with its company."""

    key: str
    company_id: str = ""
    deleted: bool = False
    timestamp: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuthKey":
        """Create from API response dict."""
        return cls(
            key=data.get("key") or "",
            company_id=data.get("companyId") or "",
            deleted=bool(data.get("deleted")),
            timestamp=data.get("timestamp"),
            raw=data,
        )


# =============================================================================
# Organisation Types
# =============================================================================


@dataclass
class User:
    """A company employee."""

    id: str
    email: str = ""
    is_admin: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            email=data.get("email") or "",
            is_admin=bool(data.get("isAdmin")),
            raw=data,
        )


@dataclass
class Department:
    """A department, optionally nested under a parent."""

    id: str
    title: str = ""
    parent_id: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Department":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            parent_id=data.get("parentId"),
            raw=data,
        )


# =============================================================================
# Project Types
# =============================================================================


@dataclass
class Project:
    """A YouGile project."""

    id: str
    title: str = ""
    deleted: bool = False
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            deleted=bool(data.get("deleted")),
            raw=data,
        )


@dataclass
class Board:
    """A board inside a project."""

    id: str
    title: str = ""
    project_id: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Board":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            project_id=data.get("projectId") or "",
            raw=data,
        )


@dataclass
class Column:
    """A column on a board."""

    id: str
    title: str = ""
    board_id: str = ""
    color: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Column":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            board_id=data.get("boardId") or "",
            color=data.get("color"),
            raw=data,
        )


@dataclass
class Task:
    """A task card."""

    id: str
    title: str = ""
    column_id: str | None = None
    description: str | None = None
    completed: bool = False
    archived: bool = False
    assigned: list[str] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Task":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            column_id=data.get("columnId"),
            description=data.get("description"),
            completed=bool(data.get("completed")),
            archived=bool(data.get("archived")),
            assigned=data.get("assigned") or [],
            raw=data,
        )


# =============================================================================
# Chat Types
# =============================================================================


@dataclass
class GroupChat:
    """A group chat."""

    id: str
    title: str = ""
    users: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GroupChat":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            users=data.get("users") or {},
            raw=data,
        )


@dataclass
class ChatMessage:
    """A chat message. Message IDs are numeric timestamps."""

    id: int
    from_user_id: str = ""
    text: str = ""
    text_html: str | None = None
    label: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatMessage":
        """Create from API response dict."""
        return cls(
            id=int(data.get("id") or 0),
            from_user_id=data.get("fromUserId") or "",
            text=data.get("text") or "",
            text_html=data.get("textHtml"),
            label=data.get("label"),
            raw=data,
        )


# =============================================================================
# Sticker Types
# =============================================================================


@dataclass
class StickerState:
    """A named state of a string or sprint sticker."""

    id: str
    name: str = ""
    color: str | None = None
    begin: int | None = None
    end: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StickerState":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            color=data.get("color"),
            begin=data.get("begin"),
            end=data.get("end"),
            raw=data,
        )


@dataclass
class Sticker:
    """A string or sprint sticker with its states."""

    id: str
    name: str = ""
    deleted: bool = False
    states: list[StickerState] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Sticker":
        """Create from API response dict."""
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            deleted=bool(data.get("deleted")),
            states=[StickerState.from_dict(s) for s in data.get("states") or []],
            raw=data,
        )


# =============================================================================
# Misc Types
# =============================================================================


@dataclass
class UploadedFile:
    """Result of a file upload."""

    url: str
    full_url: str = ""
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UploadedFile":
        """Create from API response dict."""
        return cls(
            url=data.get("url") or "",
            full_url=data.get("fullUrl") or "",
            raw=data,
        )
