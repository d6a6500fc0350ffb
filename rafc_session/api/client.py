"""Authenticated REST client for the academy API."""

from __future__ import annotations

import logging
import itertools
from typing import Any
from collections.abc import Callable

import httpx

from rafc_session.config.api import API_TIMEOUT_S

from .errors import (
    response_data,
    token_rejected,
    normalize_response_error,
    normalize_transport_error,
)
from .tokens import TokenStore

logger = logging.getLogger(__name__)

RequestObserver = Callable[[httpx.Request], None]

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


class ApiClient:
    """httpx client with bearer injection and request observers.

    Private clients send `Authorization` whenever a token is stored; public
    clients never send it. Observers see each outgoing request before it is
    sent and must not alter it.
    """

    def __init__(
        self,
        *,
        base_url: str,
        tokens: TokenStore | None = None,
        private: bool = True,
        timeout_s: float = API_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tokens = tokens
        self._private = private and tokens is not None
        self._observers: dict[int, RequestObserver] = {}
        self._observer_ids = itertools.count(1)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_s,
            headers=JSON_HEADERS,
            transport=transport,
            event_hooks={"request": [self._on_request]},
        )

    @property
    def private(self) -> bool:
        return self._private

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def register_activity_observer(self, observer: RequestObserver) -> int:
        observer_id = next(self._observer_ids)
        self._observers[observer_id] = observer
        return observer_id

    def unregister_activity_observer(self, observer_id: int) -> bool:
        return self._observers.pop(observer_id, None) is not None

    def _current_token(self) -> str | None:
        if self._tokens is None:
            return None
        try:
            return self._tokens.get_token()
        except Exception:
            logger.debug("token lookup failed", exc_info=True)
            return None

    async def _on_request(self, request: httpx.Request) -> None:
        token = self._current_token() if self._private else None
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        else:
            request.headers.pop("Authorization", None)

        for observer in list(self._observers.values()):
            try:
                observer(request)
            except Exception:
                logger.debug("request observer failed", exc_info=True)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=headers)
        except httpx.RequestError as exc:
            raise normalize_transport_error(exc) from exc

        if response.is_error:
            error = normalize_response_error(response)
            if self._private and token_rejected(error.status, error.data):
                logger.info("API rejected the stored token; clearing it")
                self._clear_token()
            raise error
        return response_data(response)

    def _clear_token(self) -> None:
        if self._tokens is None:
            return
        try:
            self._tokens.clear_token()
        except Exception:
            logger.debug("token clear failed", exc_info=True)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["ApiClient", "JSON_HEADERS", "RequestObserver"]
