"""Frame building, parsing and safe sending for the relay websocket."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from rafc_session.config.relay import (
    RELAY_KEY_DATA,
    RELAY_KEY_TYPE,
    RELAY_TYPE_ERROR,
    RELAY_KEY_CHANNEL,
    RELAY_KEY_PAYLOAD,
    RELAY_TYPE_MESSAGE,
)

logger = logging.getLogger(__name__)


def build_error_payload(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {"code": code, "message": message, "details": dict(details or {})}


def build_message_frame(channel: str, data: str) -> str:
    frame = {RELAY_KEY_TYPE: RELAY_TYPE_MESSAGE, RELAY_KEY_CHANNEL: channel, RELAY_KEY_DATA: data}
    return orjson.dumps(frame).decode("utf-8")


def build_error_frame(code: str, message: str, *, details: dict[str, Any] | None = None) -> str:
    frame = {RELAY_KEY_TYPE: RELAY_TYPE_ERROR, RELAY_KEY_PAYLOAD: build_error_payload(code, message, details=details)}
    return orjson.dumps(frame).decode("utf-8")


def parse_client_frame(raw: str) -> str:
    """Return the message body carried by a client frame."""
    try:
        frame = orjson.loads(raw)
    except Exception as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(frame, dict):
        raise ValueError("frame must be a JSON object")

    msg_type = frame.get(RELAY_KEY_TYPE)
    if msg_type != RELAY_TYPE_MESSAGE:
        raise ValueError(f"unsupported frame type: {msg_type!r}")

    data = frame.get(RELAY_KEY_DATA)
    if not isinstance(data, str) or not data.strip():
        raise ValueError("frame missing non-empty 'data'")
    return data.strip()


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("relay send failed", exc_info=True)
        return False
    return True


async def send_error(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> bool:
    return await safe_send_text(ws, build_error_frame(error_code, message, details=details))


async def reject_connection(
    ws: WebSocket,
    *,
    error_code: str,
    message: str,
    close_code: int,
) -> None:
    # Accept so we can send a structured error, then close.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(ws, error_code=error_code, message=message)
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        return


__all__ = [
    "build_error_frame",
    "build_error_payload",
    "build_message_frame",
    "parse_client_frame",
    "reject_connection",
    "safe_send_text",
    "send_error",
]
