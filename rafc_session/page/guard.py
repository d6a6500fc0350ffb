"""Token-based route guard."""

from __future__ import annotations

import time
import logging
from typing import Any
from collections.abc import Callable, Iterable

import jwt

from rafc_session.api.tokens import TokenStore
from rafc_session.state.route import RouteDecision
from rafc_session.config.api import TOKEN_EXPIRY_MARGIN_S
from rafc_session.config.session import ADMIN_HOME_PATH, ADMIN_LOGIN_PATH

logger = logging.getLogger(__name__)

ROLE_CLAIMS = ("rol_id", "role_id", "role")


def decode_claims(token: str) -> dict[str, Any]:
    # The API verifies signatures; the console only reads expiry and role.
    return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})


def extract_role(claims: dict[str, Any]) -> int:
    raw = None
    for claim in ROLE_CLAIMS:
        if claims.get(claim) is not None:
            raw = claims[claim]
            break
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def _drop_token(tokens: TokenStore) -> None:
    try:
        tokens.clear_token()
    except Exception:
        logger.debug("token clear failed", exc_info=True)


def check_route_access(
    tokens: TokenStore,
    path: str,
    *,
    role_in: Iterable[int] = (),
    login_path: str = ADMIN_LOGIN_PATH,
    home_path: str = ADMIN_HOME_PATH,
    now_fn: Callable[[], float] | None = None,
) -> RouteDecision:
    to_login = RouteDecision(action="login", path=login_path, from_path=path or home_path)

    try:
        token = tokens.get_token()
    except Exception:
        token = None
    if not token:
        return to_login

    try:
        claims = decode_claims(token)
    except jwt.PyJWTError:
        logger.info("stored token is not a readable JWT; dropping it")
        _drop_token(tokens)
        return to_login

    now = int((now_fn or time.time)())
    exp = claims.get("exp")
    if isinstance(exp, (int, float)) and now >= exp - TOKEN_EXPIRY_MARGIN_S:
        _drop_token(tokens)
        return to_login

    role = extract_role(claims)
    allowed_roles = set(role_in)
    if allowed_roles and role not in allowed_roles:
        return RouteDecision(action="redirect", path=home_path, role=role)
    return RouteDecision(action="allow", path=path, role=role)


__all__ = ["check_route_access", "decode_claims", "extract_role"]
