"""FastAPI relay carrying cross-tab broadcast channels between console processes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from rafc_session.state.relay import RelayDeps
from rafc_session.runtime.relay import build_relay_deps
from rafc_session.config.relay import RELAY_ENDPOINT_PATH
from rafc_session.relay.handler import handle_relay_connection
from rafc_session.runtime.logging import configure_logging

logger = logging.getLogger(__name__)

configure_logging()


def create_app(relay_deps: RelayDeps | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.relay_deps = relay_deps or build_relay_deps()
        if not app.state.relay_deps.settings.api_key:
            logger.warning("RAFC_RELAY_API_KEY is not set; every relay connection will be rejected")
        logger.info("relay: ready")
        yield

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.websocket(RELAY_ENDPOINT_PATH)
    async def relay_endpoint(websocket: WebSocket, channel: str) -> None:
        deps = getattr(app.state, "relay_deps", None)
        if deps is None:
            raise RuntimeError("Relay dependencies are not initialized")
        await handle_relay_connection(websocket, channel, deps)

    return app


app = create_app()

__all__ = ["app", "create_app"]
