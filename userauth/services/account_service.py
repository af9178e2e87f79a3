"""
Account lifecycle use cases: registration, verification, login/logout,
subscription changes and avatar updates.
"""

from __future__ import annotations

import logging
import os
import re
import secrets
from typing import Any, Callable, Optional

from fastapi import BackgroundTasks

from userauth.core.config import Settings
from userauth.core.errors import (
    AccountError,
    AccountExistsError,
    AccountNotFoundError,
    AccountValidationError,
    AlreadyVerifiedError,
    AvatarProcessingError,
    InvalidCredentialsError,
)
from userauth.core.mailer import send_email, verification_message
from userauth.core.security import hash_password, needs_rehash, verify_password
from userauth.core.tokens import create_access_token
from userauth.core.utils import capitalize, gravatar_url
from userauth.db.models import Account
from userauth.repositories.account_repository import AccountRepository, DuplicateEmailError
from userauth.services.avatar_service import AvatarProcessor

__all__ = [
    "AccountService",
    "AccountError",
    "AccountExistsError",
    "AccountNotFoundError",
    "AccountValidationError",
    "AlreadyVerifiedError",
    "AvatarProcessingError",
    "InvalidCredentialsError",
]

logger = logging.getLogger(__name__)

EMAIL_EXISTS_MSG = "This email is already linked to an existing account"
AUTH_ERROR_MSG = "Invalid email or password"
VERIFY_EMAIL_MSG = "You need to verify your email first"
NOT_FOUND_MSG = "User not found"
ALREADY_VERIFIED_MSG = "Verification has already been passed"

GRAVATAR_SIZE = 400
AVATAR_URL_PREFIX = "avatars"

MailSender = Callable[..., bool]


def public_profile(account: Account) -> dict[str, Any]:
    """Fields safe to return to clients: never the hash or any token."""
    data: dict[str, Any] = {}
    if account.name:
        data["name"] = account.name
    data["email"] = account.email
    data["subscription"] = account.subscription
    data["avatarUrl"] = account.avatar_url
    return data


class AccountService:
    """Orchestrates the account store, hasher, token issuer, mailer and avatar processor."""

    def __init__(
        self,
        settings: Settings,
        repository: Optional[AccountRepository] = None,
        avatar_processor: Optional[AvatarProcessor] = None,
        mail_sender: Optional[MailSender] = None,
    ):
        self.settings = settings
        self.repository = repository or AccountRepository(settings.database_url)
        self.avatar_processor = avatar_processor or AvatarProcessor(settings.avatar_size)
        self.mail_sender = mail_sender or send_email

    # -------------------------------------- helpers --------------------------------------
    def _dispatch_verification(self, email: str, token: str, background: BackgroundTasks | None) -> None:
        subject, html_body, text_body = verification_message(self.settings.base_url, token)
        if background is not None:
            background.add_task(self.mail_sender, self.settings, subject, email, html_body, text_body)
            return
        self.mail_sender(self.settings, subject, email, html_body, text_body)

    def _require(self, account_id: str) -> Account:
        account = self.repository.get_by_id(account_id)
        if not account:
            raise AccountNotFoundError(NOT_FOUND_MSG)
        return account

    # -------------------------------------- registration --------------------------------------
    def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
        subscription: str | None = None,
        background: BackgroundTasks | None = None,
    ) -> dict[str, Any]:
        if self.repository.get_by_email(email):
            raise AccountExistsError(EMAIL_EXISTS_MSG)
        if not password:
            raise AccountValidationError("Password is a required field")

        verification_token = secrets.token_urlsafe(16)
        try:
            account = self.repository.create(
                email=email,
                password_hash=hash_password(password),
                verification_token=verification_token,
                avatar_url=gravatar_url(email, size=GRAVATAR_SIZE),
                name=name,
                subscription=subscription,
            )
        except DuplicateEmailError as exc:
            # Lost a race with a concurrent registration for the same address.
            raise AccountExistsError(EMAIL_EXISTS_MSG) from exc

        logger.info("Registered account %s", account.id)
        self._dispatch_verification(account.email, verification_token, background)
        return public_profile(account)

    # -------------------------------------- verification --------------------------------------
    def verify(self, token: str) -> dict[str, str]:
        account = self.repository.get_by_verification_token(token)
        if not account:
            raise AccountNotFoundError(NOT_FOUND_MSG)
        if not self.repository.mark_verified(account.id, account.verification_token):
            raise AccountNotFoundError(NOT_FOUND_MSG)
        logger.info("Verified account %s", account.id)
        return {"message": "Verification successful"}

    def resend_verification(self, email: str, background: BackgroundTasks | None = None) -> dict[str, str]:
        account = self.repository.get_by_email(email)
        if not account:
            raise AccountNotFoundError(NOT_FOUND_MSG)
        if account.verified:
            raise AlreadyVerifiedError(ALREADY_VERIFIED_MSG)
        self._dispatch_verification(account.email, account.verification_token, background)
        return {"message": "Verification email has been sent"}

    # -------------------------------------- login / logout --------------------------------------
    def login(self, email: str, password: str) -> dict[str, Any]:
        account = self.repository.get_by_email(email)
        if not account:
            raise InvalidCredentialsError(AUTH_ERROR_MSG)
        if not account.verified:
            raise InvalidCredentialsError(VERIFY_EMAIL_MSG)
        if not verify_password(password, account.password_hash):
            raise InvalidCredentialsError(AUTH_ERROR_MSG)
        if needs_rehash(account.password_hash):
            self.repository.update_password_hash(account.id, hash_password(password))

        token = create_access_token(
            secret=self.settings.jwt_secret,
            account_id=account.id,
            expires_hours=self.settings.token_ttl_hours,
        )
        self.repository.set_token(account.id, token)
        logger.info("Account %s logged in", account.id)
        return {
            "token": token,
            "user": {"email": account.email, "subscription": account.subscription},
        }

    def logout(self, account_id: str) -> dict[str, str]:
        self.repository.set_token(account_id, None)
        logger.info("Account %s logged out", account_id)
        return {"message": "Signed out successfully"}

    def get_current(self, account: Account) -> dict[str, Any]:
        data: dict[str, Any] = {"email": account.email, "subscription": account.subscription}
        if account.name:
            data["name"] = account.name
        if account.avatar_url:
            data["avatarUrl"] = account.avatar_url
        return data

    # -------------------------------------- profile updates --------------------------------------
    def update_subscription(self, account_id: str, subscription: str) -> dict[str, str]:
        account = self.repository.update_subscription(account_id, subscription)
        if not account:
            raise AccountNotFoundError(NOT_FOUND_MSG)
        return {"message": f"Subscription has been updated to '{capitalize(account.subscription)}'"}

    def update_avatar(self, account_id: str, upload_path: str, original_filename: str = "") -> dict[str, str]:
        """Resize the temporary upload into the avatars directory and point the account at it.

        The temporary file is removed whether or not the resize succeeds; on failure
        the stored avatar reference is left untouched.
        """
        try:
            self._require(account_id)
            filename = avatar_filename(account_id, original_filename)
            destination = os.path.join(self.settings.avatars_dir, filename)
            self.avatar_processor.resize(upload_path, destination)
        finally:
            try:
                os.remove(upload_path)
            except FileNotFoundError:
                pass
        avatar_url = f"{AVATAR_URL_PREFIX}/{filename}"
        self.repository.update_avatar_url(account_id, avatar_url)
        return {"avatarUrl": avatar_url}


def avatar_filename(account_id: str, original_filename: str) -> str:
    stem = os.path.splitext(os.path.basename(original_filename or ""))[0]
    safe_stem = re.sub(r"[^A-Za-z0-9_-]+", "", stem)[:64] or "avatar"
    return f"{account_id}_{safe_stem}.jpg"
