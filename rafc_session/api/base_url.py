"""API base URL resolution."""

from __future__ import annotations

import re
import logging

from rafc_session.config.api import DEFAULT_API_BASE_URL

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_LOCAL_RE = re.compile(r"(^http://localhost)|127\.0\.0\.1")


def pick_base_url(raw: str | None, *, production: bool = False) -> str:
    url = (raw or "").strip() or DEFAULT_API_BASE_URL
    url = url.rstrip("/")
    if not _SCHEME_RE.match(url):
        url = f"http://{url}"
    if production and _LOCAL_RE.search(url):
        logger.warning("API base URL in production points at localhost: %s", url)
    return url


__all__ = ["pick_base_url"]
