from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from keydash.core.errors import ConfigError


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = "Keydash API"
    app_version: str = "0.1.0"

    # Managed store credentials, both required before the first store access
    store_url: str | None = None
    store_token: str | None = None
    store_pool_size: int = 5
    store_pool_pre_ping: bool = True
    store_echo: bool = False

    cors_allowed_origins: str | list[str] = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KEYDASH_",
        extra="ignore",
    )

    @property
    def store_configured(self) -> bool:
        """Return True when both store credentials are present."""

        return bool(self.store_url) and bool(self.store_token)

    @property
    def database_url(self) -> str:
        """Assemble a SQLAlchemy URL with the access token as password."""

        if not self.store_configured:
            raise ConfigError("Store credentials are not properly configured")

        try:
            url = make_url(self.store_url).set(password=self.store_token)
        except ArgumentError as exc:
            raise ConfigError(f"Store URL is malformed: {exc}") from exc
        return url.render_as_string(hide_password=False)

    @property
    def resolved_cors_allowed_origins(self) -> list[str]:
        """Return the configured CORS origins as a normalized list."""

        if isinstance(self.cors_allowed_origins, str):
            return [
                origin.strip()
                for origin in self.cors_allowed_origins.split(",")
                if origin.strip()
            ]

        return list(self.cors_allowed_origins)


@lru_cache
def get_settings() -> Settings:
    """Cache settings to avoid re-parsing environment files."""
    return Settings()
