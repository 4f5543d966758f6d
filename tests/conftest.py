from __future__ import annotations

import sys
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from spotdiggz.application.errors import AuthError
from spotdiggz.config.settings import Settings
from spotdiggz.infrastructure.storage.gcs import GCSSignedUrlStorageService
from spotdiggz.interfaces.http.main import create_app

FIXED_NOW = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)
SERVICE_ACCOUNT = "signer@sdz-dev.iam.gserviceaccount.com"


class StubJWKSClient:
    """Treats the bearer token itself as the Firebase uid."""

    def __init__(self, *, issuer: str, audience: str) -> None:
        self.issuer = issuer
        self.audience = audience

    async def decode_token(self, token: str, *, issuer: str, audience: str) -> dict[str, Any]:
        if issuer != self.issuer or audience != self.audience:
            raise AuthError("Invalid token issuer or audience")
        if token == "invalid":
            raise AuthError("Token validation failed")
        return {"sub": token, "user_id": token, "iss": issuer, "aud": audience}


class RecordingSigner:
    def __init__(self, signature: str = "abc123") -> None:
        self.signature = signature
        self.calls: list[str] = []

    async def sign(self, string_to_sign: str) -> str:
        self.calls.append(string_to_sign)
        return self.signature


@pytest.fixture()
def test_settings() -> Settings:
    return Settings.model_validate(
        {
            "log_level": "INFO",
            "environment": "test",
            "storage_bucket": "sdz-dev-img",
            "storage_service_account_email": SERVICE_ACCOUNT,
            "storage_signed_url_expires_secs": 900,
            "auth_project_id": "sdz-dev",
            "jwks_cache_ttl": 0,
        }
    )


@pytest.fixture()
def jwks_client(test_settings: Settings) -> StubJWKSClient:
    return StubJWKSClient(
        issuer=str(test_settings.auth_issuer),
        audience=str(test_settings.auth_project_id),
    )


@pytest.fixture()
def signer() -> RecordingSigner:
    return RecordingSigner()


@pytest.fixture()
def storage_service(test_settings: Settings, signer: RecordingSigner) -> GCSSignedUrlStorageService:
    return GCSSignedUrlStorageService(
        bucket=str(test_settings.storage_bucket),
        service_account_email=SERVICE_ACCOUNT,
        signer=signer,
        expires_in=test_settings.storage_signed_url_expires_secs,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def app(test_settings: Settings, jwks_client: StubJWKSClient, storage_service):
    return create_app(
        settings=test_settings,
        jwks_client=jwks_client,
        storage_service=storage_service,
    )


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    await app.state.http_client.aclose()
