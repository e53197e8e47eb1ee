"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings.
# Nested BaseSettings don't inherit env_file.
if _env_file and os.getenv("TESTING") != "true":
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment.

    Pydantic Settings (v2) populates values from environment variables, but
    static type checkers treat fields as constructor arguments.
    """

    return AppSettings()  # type: ignore[call-arg]


def _build_login_rate_limit_settings() -> "LoginRateLimitSettings":
    return LoginRateLimitSettings()  # type: ignore[call-arg]


def _build_auth_settings() -> "AuthSettings":
    return AuthSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    security_headers_enabled: bool = Field(
        True,
        description="Attach anti-framing/sniffing headers to /admin responses",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LoginRateLimitSettings(BaseSettings):
    """Throttling applied to the admin login form.

    Attempts are counted per identifier (the submitted email) inside a
    window; reaching ``max_attempts`` blocks the identifier for
    ``block_seconds``.
    """

    enabled: bool = Field(
        True,
        description="Enable per-identifier login throttling",
    )
    max_attempts: int = Field(
        5,
        description="Attempts allowed per window before the identifier is blocked",
        ge=1,
    )
    window_seconds: int = Field(
        15 * 60,
        description="Counting window size in seconds",
        ge=1,
    )
    block_seconds: int = Field(
        60 * 60,
        description="Block penalty in seconds once max_attempts is reached",
        ge=1,
    )
    max_entries: int | None = Field(
        10_000,
        description="Upper bound on tracked identifiers (None for unbounded)",
        ge=1,
    )
    include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOGIN_RATE_LIMIT_",
        case_sensitive=False,
    )


class AuthSettings(BaseSettings):
    """Identity provider configuration.

    ``static`` authenticates a single admin account declared in the
    environment; ``supabase`` delegates to the hosted auth service.
    Provider-specific requirements are validated in the factory.
    """

    provider: str = Field(
        "static",
        description="Identity provider name (static, supabase)",
    )
    admin_email: str | None = Field(
        None,
        description="Admin account email for the static provider",
    )
    admin_password: str | None = Field(
        None,
        description="Admin account password for the static provider",
    )
    supabase_url: str | None = Field(
        None,
        description="Base URL of the Supabase project (https://<ref>.supabase.co)",
    )
    supabase_anon_key: str | None = Field(
        None,
        description="Public anon key sent in the apikey header",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Identity provider request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int | None = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (None disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept/propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    login_rate_limit: LoginRateLimitSettings = Field(
        default_factory=_build_login_rate_limit_settings
    )
    auth: AuthSettings = Field(default_factory=_build_auth_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
