"""Signed session tokens (JWT, HS256)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

_JWT_ALG = "HS256"


def create_access_token(*, secret: str, account_id: str, expires_hours: int) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = datetime.now(timezone.utc)
    exp = now + timedelta(hours=max(1, int(expires_hours)))

    payload: Dict[str, Any] = {
        "id": str(account_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Decode and validate a token; raises jwt.InvalidTokenError subclasses on failure."""
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG])
