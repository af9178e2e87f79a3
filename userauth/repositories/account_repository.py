"""High-level data access helpers for accounts, backed by SQLAlchemy."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from userauth.db.models import Account, normalize_email
from userauth.db.session import get_session


class DuplicateEmailError(Exception):
    """The unique constraint on accounts.email rejected an insert."""


class AccountRepository:
    """CRUD helpers wrapping the SQLAlchemy session."""

    def __init__(self, database_url: str):
        self.database_url = database_url

    # -------------------------- lookups --------------------------
    def get_by_id(self, account_id: str) -> Optional[Account]:
        if not account_id:
            return None
        with get_session(self.database_url) as session:
            return session.get(Account, account_id)

    def get_by_email(self, email: str) -> Optional[Account]:
        value = normalize_email(email)
        if not value:
            return None
        with get_session(self.database_url) as session:
            stmt = select(Account).where(Account.email == value)
            return session.execute(stmt).scalar_one_or_none()

    def get_by_verification_token(self, token: str) -> Optional[Account]:
        value = (token or "").strip()
        if not value:
            return None
        with get_session(self.database_url) as session:
            stmt = select(Account).where(Account.verification_token == value)
            return session.execute(stmt).scalar_one_or_none()

    # -------------------------- writes --------------------------
    def create(
        self,
        *,
        email: str,
        password_hash: str,
        verification_token: str,
        avatar_url: str | None = None,
        name: str | None = None,
        subscription: str | None = None,
    ) -> Account:
        entity = Account(
            email=email,
            password_hash=password_hash,
            verification_token=verification_token,
            avatar_url=avatar_url,
            name=(name or "").strip() or None,
            subscription=subscription,
            verified=False,
        )
        with get_session(self.database_url) as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise DuplicateEmailError(entity.email) from exc
            session.refresh(entity)
            return entity

    def mark_verified(self, account_id: str, verification_token: str) -> bool:
        """Consume the verification token; False when another request already did."""
        with get_session(self.database_url) as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id, Account.verification_token == verification_token)
                .values(verified=True, verification_token=None, updated_at=datetime.now(timezone.utc))
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def set_token(self, account_id: str, token: str | None) -> None:
        with get_session(self.database_url) as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(token=token, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def update_password_hash(self, account_id: str, password_hash: str) -> None:
        with get_session(self.database_url) as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def update_subscription(self, account_id: str, subscription: str) -> Optional[Account]:
        # Assign through the ORM so the model's enum validation runs.
        with get_session(self.database_url) as session:
            entity = session.get(Account, account_id)
            if not entity:
                return None
            entity.subscription = subscription
            session.commit()
            session.refresh(entity)
            return entity

    def update_avatar_url(self, account_id: str, avatar_url: str) -> None:
        with get_session(self.database_url) as session:
            stmt = (
                update(Account)
                .where(Account.id == account_id)
                .values(avatar_url=avatar_url, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()
