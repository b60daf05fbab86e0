"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    auth_secret: str = Field(
        description="Shared secret expected verbatim in the Authorization header",
        min_length=1,
    )
    firebase_project_id: str | None = Field(
        default=None,
        description="Project id of the Firebase service account",
    )
    firebase_client_email: str | None = Field(
        default=None,
        description="Client email of the Firebase service account",
    )
    firebase_private_key: str | None = Field(
        default=None,
        description="PEM private key of the Firebase service account",
    )
    azure_storage_connection_string: str | None = Field(
        default=None,
        description="Connection string for the blob account holding uploaded images",
    )
    azure_storage_container_name: str | None = Field(
        default=None,
        description="Container receiving uploaded images",
    )
    app_timezone: str = Field(default="UTC")
    link_base_url: str = Field(
        default="https://howler.andyfx.net",
        description="Origin prepended to relative links embedded in push messages",
    )
    hashid_salt: str = Field(default="howler")
    hashid_min_length: int = Field(default=6, ge=0)
    push_icon_path: str = Field(default="/icons/favicon-48x48.png")
    debug_explain_queries: bool = Field(
        default=False,
        description="Log an EXPLAIN of every relayed query",
    )

    @model_validator(mode="after")
    def _validate_firebase_credentials(self) -> "Settings":
        values = (
            self.firebase_project_id,
            self.firebase_client_email,
            self.firebase_private_key,
        )
        if any(values) and not all(values):
            raise ValueError(
                "FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY "
                "must be provided together"
            )
        return self

    @property
    def firebase_configured(self) -> bool:
        return bool(self.firebase_project_id)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
