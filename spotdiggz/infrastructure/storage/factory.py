from __future__ import annotations

import logging

import httpx

from spotdiggz.config.settings import Settings
from spotdiggz.infrastructure.storage.disabled import DisabledStorageService
from spotdiggz.infrastructure.storage.gcs import GCSSignedUrlStorageService
from spotdiggz.infrastructure.storage.ports import StorageService
from spotdiggz.infrastructure.storage.signer import IAMCredentialsSigner
from spotdiggz.infrastructure.storage.token_sources import build_token_chain

logger = logging.getLogger(__name__)


def build_storage_service(settings: Settings, http: httpx.AsyncClient) -> StorageService:
    bucket = settings.storage_bucket
    service_account = settings.storage_service_account_email
    if not bucket or not service_account:
        logger.warning("Storage config missing, upload-url will be disabled")
        return DisabledStorageService()

    tokens = build_token_chain(
        http,
        overrides=settings.signing_token_overrides(),
        metadata_url=settings.metadata_token_url,
    )
    signer = IAMCredentialsSigner(
        http=http,
        service_account_email=service_account,
        tokens=tokens,
        base_url=settings.iam_credentials_base_url,
    )
    return GCSSignedUrlStorageService(
        bucket=bucket,
        service_account_email=service_account,
        signer=signer,
        expires_in=settings.storage_signed_url_expires_secs,
    )
