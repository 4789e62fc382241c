"""
Configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that the
application starts in development without any configuration.  In a
production deployment override at least ``SECRET_KEY``,
``COOKIE_SECURE`` and the SMTP credentials.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Evenza API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    secret_key: str = os.getenv("SECRET_KEY", "change_me")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    # Lifetime of the auth cookie and session when "remember me" is ticked
    remember_me_days: int = int(os.getenv("REMEMBER_ME_DAYS", "30"))

    # Cookie carrying the JWT, read after the Authorization header
    auth_cookie_name: str = os.getenv("AUTH_COOKIE_NAME", "authToken")
    # Cookie carrying the opaque server-side session id, read last
    session_cookie_name: str = os.getenv("SESSION_COOKIE_NAME", "evenza_session")
    cookie_secure: bool = _env_bool("COOKIE_SECURE")

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "evenza.db")

    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    upload_url_prefix: str = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
    max_image_size: int = int(os.getenv("MAX_IMAGE_SIZE", str(5 * 1024 * 1024)))
    max_video_size: int = int(os.getenv("MAX_VIDEO_SIZE", str(50 * 1024 * 1024)))

    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "587"))
    smtp_user: str = os.getenv("SMTP_USER", "")
    smtp_password: str = os.getenv("SMTP_PASSWORD", "")
    smtp_use_tls: bool = _env_bool("SMTP_USE_TLS", "true")
    email_from: str = os.getenv("EMAIL_FROM", "noreply@evenza.local")
    email_from_name: str = os.getenv("EMAIL_FROM_NAME", "Evenza Team")

    # Comma-separated list of origins allowed by CORS.  Empty disables CORS.
    cors_origins: str = os.getenv("CORS_ORIGINS", "")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
