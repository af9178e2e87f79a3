"""
Configuration helpers for the userauth backend.

Settings is built once from environment variables and then handed explicitly
to the services/routers that need it, so nothing below the app factory reads
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    base_url: str
    jwt_secret: str
    database_url: str
    port: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str
    token_ttl_hours: int
    avatars_dir: str
    temp_dir: str
    avatar_size: int
    max_avatar_bytes: int
    log_level: str
    smtp_reply_to: str = ""


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        base_url=os.getenv("BASE_URL", "http://localhost:3000").rstrip("/"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./userauth.db"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
        token_ttl_hours=_int(os.getenv("TOKEN_TTL_HOURS", "23"), 23),
        avatars_dir=os.getenv("AVATARS_DIR", os.path.join("public", "avatars")),
        temp_dir=os.getenv("TEMP_DIR", "tmp"),
        avatar_size=_int(os.getenv("AVATAR_SIZE", "250"), 250),
        max_avatar_bytes=_int(os.getenv("MAX_AVATAR_BYTES", "2097152"), 2 * 1024 * 1024),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        smtp_reply_to=os.getenv("SMTP_REPLY_TO", ""),
    )
