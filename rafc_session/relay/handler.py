"""Relay connection handler: admit, fan frames out to channel peers, clean up."""

from __future__ import annotations

import math
import asyncio
import logging
import contextlib

from fastapi import WebSocket, WebSocketDisconnect

from rafc_session.errors import RateLimitError
from rafc_session.state.relay import RelayDeps
from rafc_session.config.relay import (
    RELAY_CLOSE_BUSY_CODE,
    RELAY_ERROR_AUTH_FAILED,
    RELAY_ERROR_RATE_LIMITED,
    RELAY_CLOSE_UNAUTHORIZED_CODE,
    RELAY_ERROR_INVALID_MESSAGE,
    RELAY_ERROR_SERVER_AT_CAPACITY,
)

from .auth import authenticate_websocket
from .frames import send_error, safe_send_text, reject_connection, parse_client_frame, build_message_frame
from .limits import RelayFrameBudget
from .lifecycle import RelayLifecycle

logger = logging.getLogger(__name__)


async def _prepare_connection(ws: WebSocket, channel: str, deps: RelayDeps) -> bool:
    if not await authenticate_websocket(ws, expected_api_key=deps.settings.api_key):
        await reject_connection(
            ws,
            error_code=RELAY_ERROR_AUTH_FAILED,
            message="Authentication required. Provide a valid key via 'api_key' query parameter or 'X-API-Key' header.",
            close_code=RELAY_CLOSE_UNAUTHORIZED_CODE,
        )
        return False

    if not await deps.hub.connect(channel, ws):
        await reject_connection(
            ws,
            error_code=RELAY_ERROR_SERVER_AT_CAPACITY,
            message="Relay cannot accept new connections. Please try again later.",
            close_code=RELAY_CLOSE_BUSY_CODE,
        )
        return False

    try:
        await ws.accept()
    except Exception:
        with contextlib.suppress(Exception):
            await deps.hub.disconnect(channel, ws)
        raise
    return True


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: RelayLifecycle, tick_s: float) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(ws.receive_text(), timeout=tick_s * 2)
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def _admit_frame(ws: WebSocket, budget: RelayFrameBudget, kind: str) -> bool:
    try:
        budget.admit(kind)
    except RateLimitError as exc:
        retry_in_s = int(max(1, math.ceil(float(exc.retry_in)))) if exc.retry_in else 1
        await send_error(
            ws,
            error_code=RELAY_ERROR_RATE_LIMITED,
            message=(
                f"at most {exc.limit} {exc.kind!r} messages per {int(exc.window_seconds)} seconds "
                f"on {exc.channel}; retry in {retry_in_s} seconds"
            ),
            details={
                "channel": exc.channel,
                "kind": exc.kind,
                "retry_in": retry_in_s,
                "limit": exc.limit,
                "window_seconds": int(exc.window_seconds),
            },
        )
        return False
    return True


async def _relay(ws: WebSocket, channel: str, data: str, deps: RelayDeps) -> int:
    text = build_message_frame(channel, data)
    delivered = 0
    for peer in deps.hub.peers(channel, ws):
        if await safe_send_text(peer, text):
            delivered += 1
    return delivered


async def run_relay_loop(ws: WebSocket, channel: str, lifecycle: RelayLifecycle, deps: RelayDeps) -> None:
    budget = RelayFrameBudget(
        channel,
        limit=deps.settings.max_messages_per_window,
        window_seconds=deps.settings.message_window_seconds,
    )
    while True:
        try:
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle, deps.settings.watchdog_tick_s)
        except WebSocketDisconnect:
            return
        if should_exit:
            return
        if raw is None:
            continue

        lifecycle.record_frame()

        try:
            data = parse_client_frame(raw)
        except ValueError as exc:
            await send_error(ws, error_code=RELAY_ERROR_INVALID_MESSAGE, message=str(exc))
            continue

        if not await _admit_frame(ws, budget, data):
            continue

        delivered = await _relay(ws, channel, data, deps)
        logger.debug("relayed %r on %s to %d peers", data, channel, delivered)


async def handle_relay_connection(ws: WebSocket, channel: str, deps: RelayDeps) -> None:
    lifecycle: RelayLifecycle | None = None
    admitted = False
    try:
        if not await _prepare_connection(ws, channel, deps):
            return
        admitted = True

        lifecycle = RelayLifecycle(
            ws,
            channel,
            idle_timeout_s=deps.settings.idle_timeout_s,
            watchdog_tick_s=deps.settings.watchdog_tick_s,
        )
        lifecycle.start()

        logger.info("relay connection accepted on %s. Active: %s", channel, deps.hub.get_connection_count())
        await run_relay_loop(ws, channel, lifecycle, deps)
    finally:
        if lifecycle is not None:
            with contextlib.suppress(Exception):
                await lifecycle.stop()

        if admitted:
            with contextlib.suppress(Exception):
                await deps.hub.disconnect(channel, ws)
            logger.info(
                "relay connection closed on %s after %s frames. Active: %s",
                channel,
                lifecycle.frames if lifecycle is not None else 0,
                deps.hub.get_connection_count(),
            )


__all__ = ["handle_relay_connection", "run_relay_loop"]
