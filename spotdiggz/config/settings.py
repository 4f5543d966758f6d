from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_METADATA_TOKEN_URL = (
    "http://metadata.google.internal/computeMetadata/v1/instance/service-accounts/default/token"
)
DEFAULT_FIREBASE_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)
DEFAULT_SIGNED_URL_EXPIRES_SECS = 900
DEFAULT_CORS_ALLOWED_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    log_level: str = "INFO"
    environment: str = "dev"
    # Cloud Storage signed uploads
    storage_bucket: str | None = None
    storage_service_account_email: str | None = None
    storage_signed_url_expires_secs: int = Field(
        default=DEFAULT_SIGNED_URL_EXPIRES_SECS, ge=1, le=604800
    )
    # Bearer overrides for local runs; metadata server is used otherwise
    storage_signing_token: SecretStr | None = None
    firestore_token: SecretStr | None = None
    metadata_token_url: str = DEFAULT_METADATA_TOKEN_URL
    iam_credentials_base_url: str = "https://iamcredentials.googleapis.com/v1"
    http_timeout_seconds: float = 5.0
    # Firebase auth
    auth_project_id: str | None = None
    auth_jwks_url: str = DEFAULT_FIREBASE_JWKS_URL
    jwks_cache_ttl: int = 300
    # CORS
    cors_allowed_origins: str = DEFAULT_CORS_ALLOWED_ORIGINS

    model_config = SettingsConfigDict(
        env_prefix="SDZ_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("storage_bucket", "storage_service_account_email", "auth_project_id")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("storage_signed_url_expires_secs", mode="before")
    @classmethod
    def expires_fallback(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        try:
            return int(value.strip())
        except ValueError:
            logger.warning(
                "Unparsable SDZ_STORAGE_SIGNED_URL_EXPIRES_SECS %r, using %s",
                value,
                DEFAULT_SIGNED_URL_EXPIRES_SECS,
            )
            return DEFAULT_SIGNED_URL_EXPIRES_SECS

    @property
    def storage_configured(self) -> bool:
        return bool(self.storage_bucket and self.storage_service_account_email)

    @property
    def auth_issuer(self) -> str | None:
        if not self.auth_project_id:
            return None
        return f"https://securetoken.google.com/{self.auth_project_id}"

    @property
    def cors_allowed_origins_list(self) -> list[str]:
        """Convert cors_allowed_origins string to list"""
        origins = [v.strip() for v in self.cors_allowed_origins.split(",") if v.strip()]
        if not origins:
            return DEFAULT_CORS_ALLOWED_ORIGINS.split(",")
        return origins

    def signing_token_overrides(self) -> list[str | None]:
        """Explicit bearer tokens in priority order (signing-specific first)."""
        return [
            self.storage_signing_token.get_secret_value() if self.storage_signing_token else None,
            self.firestore_token.get_secret_value() if self.firestore_token else None,
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
