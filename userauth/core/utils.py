"""
Utility helpers shared across routers/services.
"""

import hashlib
from urllib.parse import urlencode

GRAVATAR_BASE = "https://www.gravatar.com/avatar/"


def absolute_url(base_url: str, path: str) -> str:
    """
    Join a relative path onto the public base URL.
    """
    base = (base_url or "").rstrip("/")
    if not path:
        return base + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base + path


def gravatar_url(email: str, size: int = 400, default: str = "identicon") -> str:
    digest = hashlib.md5((email or "").strip().lower().encode("utf-8")).hexdigest()
    return f"{GRAVATAR_BASE}{digest}?{urlencode({'s': size, 'd': default})}"


def capitalize(value: str) -> str:
    # str.capitalize() would lower-case the rest of the word
    if not value:
        return value
    return value[0].upper() + value[1:]
