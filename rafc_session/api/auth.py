"""Login and sign-out flows for admin staff and guardians."""

from __future__ import annotations

import logging
from typing import Any

import orjson

from rafc_session.errors import ApiError, LoginError
from rafc_session.page.router import HistoryRouter
from rafc_session.storage.tab import TabStorage
from rafc_session.state.login import GuardianLogin
from rafc_session.config.session import (
    ADMIN_HOME_PATH,
    ADMIN_LOGIN_PATH,
    GUARDIAN_HOME_PATH,
    GUARDIAN_CHANGE_PASSWORD_PATH,
)
from rafc_session.config.api import (
    TOKEN_KEY,
    LOGIN_PATH,
    LOGOUT_PATH,
    USER_INFO_KEY,
    GUARDIAN_TOKEN_KEY,
    GUARDIAN_RUT_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
    GUARDIAN_LOGIN_API_PATH,
)

from .client import ApiClient
from .tokens import TokenStore

logger = logging.getLogger(__name__)


def safe_redirect_target(raw: Any, default: str = ADMIN_HOME_PATH) -> str:
    """Only in-app absolute paths are followed after login."""
    if isinstance(raw, str) and raw.startswith("/") and not raw.startswith("//"):
        return raw
    return default


def normalize_rut(raw: Any) -> str:
    """Keep the first 8 digits, as the portal RUT field does; a trailing check
    digit falls off."""
    return "".join(ch for ch in str(raw or "") if ch.isdigit())[:GUARDIAN_RUT_LENGTH]


class AuthService:
    def __init__(
        self,
        api: ApiClient,
        tokens: TokenStore,
        storage: TabStorage,
        guardian_tokens: TokenStore | None = None,
    ) -> None:
        self._api = api
        self._tokens = tokens
        self._storage = storage
        self._guardian_tokens = guardian_tokens or TokenStore(storage, GUARDIAN_TOKEN_KEY)
        self._signing_out = False

    @property
    def guardian_tokens(self) -> TokenStore:
        return self._guardian_tokens

    @property
    def signing_out(self) -> bool:
        return self._signing_out

    async def login(self, username: str, password: str) -> dict[str, Any]:
        username = (username or "").strip()
        password = password or ""
        if len(username) < MIN_USERNAME_LENGTH or len(password) < MIN_PASSWORD_LENGTH:
            raise LoginError("username and/or password too short")
        return await self._login(LOGIN_PATH, {"nombre_usuario": username, "password": password})

    async def login_guardian(self, rut: str, password: str, *, redirect_to: Any = None) -> GuardianLogin:
        """Guardian portal login with an 8-digit RUT.

        The portal token is kept under its own key. A `rafc_token` in the
        response is stored too, since the endpoint shares the staff contract.
        """
        rut = normalize_rut(rut)
        password = password or ""
        if len(rut) != GUARDIAN_RUT_LENGTH or len(password) < MIN_PASSWORD_LENGTH:
            raise LoginError("invalid RUT or password")

        try:
            self._guardian_tokens.clear_token()
        except Exception:
            logger.debug("guardian token clear failed", exc_info=True)
        data = await self._post_credentials(GUARDIAN_LOGIN_API_PATH, {"rut": rut, "password": password})
        if not isinstance(data, dict):
            data = {}

        self._tokens.set_token(data.get(TOKEN_KEY))
        token = data.get("token") or data.get(TOKEN_KEY)
        if not self._guardian_tokens.set_token(token):
            raise LoginError("no token in login response")

        must_change = data.get("must_change_password") is True
        next_path = (
            GUARDIAN_CHANGE_PASSWORD_PATH if must_change else safe_redirect_target(redirect_to, GUARDIAN_HOME_PATH)
        )
        return GuardianLogin(token=token, must_change_password=must_change, next_path=next_path, data=data)

    async def _post_credentials(self, path: str, body: dict[str, str]) -> Any:
        try:
            return await self._api.post(path, json=body)
        except ApiError as exc:
            logger.error("login failed: %s", exc.message)
            if exc.status in (400, 401):
                raise LoginError("invalid credentials", status=exc.status) from exc
            raise

    async def _login(self, path: str, body: dict[str, str]) -> dict[str, Any]:
        self._forget_session()
        data = await self._post_credentials(path, body)

        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        if not self._tokens.set_token(token):
            raise LoginError(f"no {TOKEN_KEY} in login response")

        user = data.get("user")
        if user:
            try:
                self._storage.set_item(USER_INFO_KEY, orjson.dumps(user).decode("utf-8"))
            except Exception:
                logger.debug("could not persist user info", exc_info=True)
        return data

    def logout(self) -> None:
        self._forget_session()

    def _forget_session(self) -> None:
        for clear in (self._tokens.clear_token, lambda: self._storage.remove_item(USER_INFO_KEY)):
            try:
                clear()
            except Exception:
                logger.debug("session cleanup step failed", exc_info=True)

    async def sign_out(self, router: HistoryRouter, *, redirect_to: str = ADMIN_LOGIN_PATH) -> bool:
        """Tell the API (best effort), drop the local session, leave the private area.

        Returns False when a sign-out is already in progress.
        """
        if self._signing_out:
            return False
        self._signing_out = True
        try:
            await self._api.post(LOGOUT_PATH)
        except ApiError:
            logger.debug("remote logout failed; clearing local session anyway")
        finally:
            self._forget_session()
            self._signing_out = False
            router.navigate_replace(redirect_to)
        return True


__all__ = ["AuthService", "normalize_rut", "safe_redirect_target"]
