"""Bearer-token authentication for the protected endpoints."""
from __future__ import annotations

import logging
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from userauth.core.tokens import decode_access_token
from userauth.db.models import Account

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

NOT_AUTHORIZED_MSG = "Not authorized"


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=401, detail=NOT_AUTHORIZED_MSG, headers={"WWW-Authenticate": "Bearer"})


def current_account(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Account:
    """Resolve the account behind ``Authorization: Bearer <jwt>``.

    The token must decode with the configured secret and must still be the one
    stored in the account's session slot, so a token dropped by logout (or
    replaced by a newer login) is refused.
    """
    service = request.app.state.account_service
    if credentials is None or not credentials.credentials:
        raise _unauthorized()
    token = credentials.credentials

    try:
        payload = decode_access_token(token=token, secret=service.settings.jwt_secret)
    except (jwt.InvalidTokenError, ValueError) as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthorized()

    account = service.repository.get_by_id(str(payload.get("id") or ""))
    if account is None or not account.token or account.token != token:
        raise _unauthorized()
    return account
