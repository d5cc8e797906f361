"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. AUTHGATE_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from urllib.parse import urlsplit

from pydantic import SecretStr, ValidationError, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid.

    This is fatal at startup; it is never raised per request.
    """

    def __init__(self, message: str = "Invalid configuration"):
        self.message = message
        super().__init__(self.message)


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / ".git").is_dir():
            return parent
        if parent == Path("/app"):
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. AUTHGATE_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("AUTHGATE_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - app fails without these)
    auth_secret: SecretStr  # Signs session tokens, CSRF hashes and OAuth state
    auth_url: str  # Origin under which the /auth endpoints are served

    # Application
    app_name: str = "AuthGate"

    # Cross-origin client application
    cors_origin: str = ""
    auth_cookie_domain: str | None = None

    # Google OAuth (provider is enabled only when both are set)
    google_client_id: str | None = None
    google_client_secret: SecretStr | None = None

    # Database
    database_url: str = "sqlite+aiosqlite:///data/authgate.db"

    # Sessions & passwords
    session_max_age_days: int = 30
    password_hash_rounds: int = 12

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8787
    api_debug: bool = False

    # Logging
    log_level: str = "INFO"

    @field_validator("auth_secret")
    @classmethod
    def _validate_auth_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            msg = "AUTH_SECRET cannot be empty"
            raise ValueError(msg)
        return v

    @field_validator("auth_url")
    @classmethod
    def _validate_auth_url(cls, v: str) -> str:
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            msg = f"AUTH_URL must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("cors_origin", mode="before")
    @classmethod
    def _validate_cors_origin(cls, v: str | None) -> str:
        return str(v).strip().rstrip("/") if v else ""

    @field_validator("auth_cookie_domain", "google_client_id", mode="before")
    @classmethod
    def _empty_as_none(cls, v: str | None) -> str | None:
        return v or None

    # Computed properties
    @computed_field  # type: ignore[prop-decorator]
    @property
    def base_url(self) -> str:
        """Origin of AUTH_URL (scheme://host[:port])."""
        parts = urlsplit(self.auth_url)
        return f"{parts.scheme}://{parts.netloc}"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> list[str]:
        """Origins allowed by the CORS middleware."""
        return [self.cors_origin] if self.cors_origin else []

    @property
    def google_enabled(self) -> bool:
        return bool(
            self.google_client_id
            and self.google_client_secret
            and self.google_client_secret.get_secret_value()
        )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    Raises
    ------
    ConfigurationError
        If AUTH_SECRET or AUTH_URL is missing or invalid.
    """
    try:
        return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]).upper() or "settings"
            for error in e.errors()
        )
        msg = f"Invalid or missing configuration: {fields}"
        raise ConfigurationError(msg) from e


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
