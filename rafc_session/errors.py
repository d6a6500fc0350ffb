"""Shared error types for the RAFC session package."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ApiError(Exception):
    """Normalized failure of an API request (status 0 for network errors)."""

    status: int
    message: str
    data: Any = None
    code: str | None = None


@dataclass(frozen=True, slots=True)
class LoginError(Exception):
    """Raised when a login attempt is rejected before or after the request."""

    message: str
    status: int = 0


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a relay frame budget is exhausted for one message kind."""

    retry_in: float
    limit: int
    window_seconds: float
    channel: str = ""
    kind: str = ""


@dataclass(frozen=True, slots=True)
class StorageQuotaError(Exception):
    """Raised when a storage write would exceed the configured quota."""

    key: str
    quota_bytes: int


@dataclass(frozen=True, slots=True)
class StorageUnavailableError(Exception):
    """Raised by every access to a disabled storage backing."""

    reason: str = "storage disabled"


@dataclass(frozen=True, slots=True)
class ChannelUnsupportedError(Exception):
    """Raised when a broadcast channel cannot be opened in this runtime."""

    name: str
    reason: str


__all__ = [
    "ApiError",
    "ChannelUnsupportedError",
    "LoginError",
    "RateLimitError",
    "StorageQuotaError",
    "StorageUnavailableError",
]
