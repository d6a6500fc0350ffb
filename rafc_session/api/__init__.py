from .auth import AuthService, normalize_rut, safe_redirect_target
from .client import ApiClient, RequestObserver
from .tokens import TokenStore
from .base_url import pick_base_url

__all__ = [
    "ApiClient",
    "AuthService",
    "RequestObserver",
    "TokenStore",
    "normalize_rut",
    "pick_base_url",
    "safe_redirect_target",
]
