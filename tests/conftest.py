from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Make the userauth package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userauth.app import create_app  # noqa: E402
from userauth.core.config import Settings  # noqa: E402
from userauth.db import models  # noqa: E402
from userauth.db import session as db_session  # noqa: E402
from userauth.repositories.account_repository import AccountRepository  # noqa: E402
from userauth.services.account_service import AccountService  # noqa: E402


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        base_url="http://testserver",
        jwt_secret="test-secret",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        port=3000,
        smtp_host="",
        smtp_port=465,
        smtp_user="",
        smtp_password="",
        smtp_from="",
        token_ttl_hours=23,
        avatars_dir=str(tmp_path / "public" / "avatars"),
        temp_dir=str(tmp_path / "tmp"),
        avatar_size=250,
        max_avatar_bytes=2 * 1024 * 1024,
        log_level="INFO",
    )


@pytest.fixture()
def db(settings):
    """Temporary SQLite schema, torn down completely so the file is not left locked."""
    engine = db_session.get_engine(settings.database_url)
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield settings.database_url

    try:
        models.Base.metadata.drop_all(bind=engine)
    finally:
        engine.dispose()
        db_session.get_engine.cache_clear()
        db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def sent_emails():
    return []


@pytest.fixture()
def repo(db) -> AccountRepository:
    return AccountRepository(db)


@pytest.fixture()
def service(settings, repo, sent_emails) -> AccountService:
    def fake_send(cfg, subject, to_email, html_body, text_body=None):
        sent_emails.append({"subject": subject, "to": to_email, "html": html_body, "text": text_body})
        return True

    return AccountService(settings, repository=repo, mail_sender=fake_send)


@pytest.fixture()
def client(settings, service) -> TestClient:
    return TestClient(create_app(settings, service=service))
