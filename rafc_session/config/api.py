"""REST API client settings (env-resolved constants only)."""

from __future__ import annotations

from .env import get_str, get_float

TOKEN_KEY = "rafc_token"
USER_INFO_KEY = "user_info"
GUARDIAN_TOKEN_KEY = "rafc_apoderado_token"

DEFAULT_API_BASE_URL = "http://127.0.0.1:8000"

API_BASE_URL_RAW: str = get_str("RAFC_API_BASE_URL", DEFAULT_API_BASE_URL)
API_TIMEOUT_S: float = get_float("RAFC_API_TIMEOUT_S", 15.0, minimum=0.1)
APP_ENV: str = get_str("RAFC_ENV", "development").lower()

LOGIN_PATH = "/auth/login"
GUARDIAN_LOGIN_API_PATH = "/auth-apoderado/login"
LOGOUT_PATH = "/auth/logout"

DEFAULT_ERROR_MESSAGE = "Network or server error"

# Fragments of a 401 message that mean the stored token is no longer usable.
TOKEN_REJECTED_MARKERS = (
    "token inválido",
    "token invalido",
    "expirado",
    "falta bearer",
    "invalid token",
    "jwt",
    "unauthorized",
)

# Tokens expiring within this many seconds are treated as already expired.
TOKEN_EXPIRY_MARGIN_S = 30

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 4
GUARDIAN_RUT_LENGTH = 8

__all__ = [
    "API_BASE_URL_RAW",
    "API_TIMEOUT_S",
    "APP_ENV",
    "DEFAULT_API_BASE_URL",
    "DEFAULT_ERROR_MESSAGE",
    "GUARDIAN_LOGIN_API_PATH",
    "GUARDIAN_RUT_LENGTH",
    "GUARDIAN_TOKEN_KEY",
    "LOGIN_PATH",
    "LOGOUT_PATH",
    "MIN_PASSWORD_LENGTH",
    "MIN_USERNAME_LENGTH",
    "TOKEN_EXPIRY_MARGIN_S",
    "TOKEN_KEY",
    "TOKEN_REJECTED_MARKERS",
    "USER_INFO_KEY",
]
