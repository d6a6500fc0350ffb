"""Normalization of failed API responses."""

from __future__ import annotations

from typing import Any

import httpx

from rafc_session.errors import ApiError
from rafc_session.config.api import DEFAULT_ERROR_MESSAGE, TOKEN_REJECTED_MARKERS


def response_data(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def error_message(data: Any, fallback: str | None = None) -> str:
    if isinstance(data, dict):
        for key in ("message", "detail", "error"):
            value = data.get(key)
            if value:
                return str(value)
    return fallback or DEFAULT_ERROR_MESSAGE


def token_rejected(status: int, data: Any) -> bool:
    if status != 401:
        return False
    message = str(data.get("message") or "").lower() if isinstance(data, dict) else ""
    return any(marker in message for marker in TOKEN_REJECTED_MARKERS)


def normalize_response_error(response: httpx.Response) -> ApiError:
    data = response_data(response)
    return ApiError(
        status=response.status_code,
        message=error_message(data, response.reason_phrase),
        data=data,
    )


def normalize_transport_error(exc: httpx.RequestError) -> ApiError:
    return ApiError(status=0, message=str(exc) or DEFAULT_ERROR_MESSAGE, code=type(exc).__name__)


__all__ = [
    "error_message",
    "normalize_response_error",
    "normalize_transport_error",
    "response_data",
    "token_rejected",
]
