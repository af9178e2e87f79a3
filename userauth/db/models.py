"""SQLAlchemy models for user accounts."""
from __future__ import annotations

import re
import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Text, func
from sqlalchemy.orm import validates

from userauth.core.errors import AccountValidationError

from .session import Base

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SUBSCRIPTION_TIERS = ("starter", "pro", "business")
DEFAULT_SUBSCRIPTION = "starter"


def _new_id() -> str:
    return uuid.uuid4().hex


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    avatar_url = Column(String(512), nullable=True)
    subscription = Column(String(16), nullable=False, default=DEFAULT_SUBSCRIPTION)
    token = Column(Text, nullable=True)
    verification_token = Column(String(64), nullable=True, index=True)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @validates("email")
    def _validate_email(self, key, value):
        email = normalize_email(value)
        if not email:
            raise AccountValidationError("Email is a required field")
        if not EMAIL_PATTERN.match(email):
            raise AccountValidationError("Email must be a valid email address")
        return email

    @validates("subscription")
    def _validate_subscription(self, key, value):
        tier = (value or DEFAULT_SUBSCRIPTION).strip().lower()
        if tier not in SUBSCRIPTION_TIERS:
            raise AccountValidationError(f"Subscription must be one of: {', '.join(SUBSCRIPTION_TIERS)}")
        return tier

    @validates("password_hash")
    def _validate_password_hash(self, key, value):
        if not value:
            raise AccountValidationError("Password is a required field")
        return value


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()
