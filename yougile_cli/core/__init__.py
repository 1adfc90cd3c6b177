"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses for YouGile API payloads
- Low-level HTTP client with auth and error handling
"""

from yougile_cli.core.client import APIClient, APIError, CLIError, ValidationError
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

__all__ = [
    "APIClient",
    "APIError",
    "AuthKey",
    "Board",
    "CLIError",
    "ChatMessage",
    "Column",
    "Company",
    "Department",
    "GroupChat",
    "PaginatedResponse",
    "Project",
    "Sticker",
    "StickerState",
    "Task",
    "UploadedFile",
    "User",
    "ValidationError",
]
