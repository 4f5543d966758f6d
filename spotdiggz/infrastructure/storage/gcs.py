from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from spotdiggz.infrastructure.storage.canonical import (
    CredentialScope,
    build_canonical_request,
    build_string_to_sign,
)
from spotdiggz.infrastructure.storage.ports import StorageService, UploadUrlRequest, UploadUrlResult
from spotdiggz.infrastructure.storage.signed_url import build_object_url, build_signed_url
from spotdiggz.infrastructure.storage.signer import Signer
from spotdiggz.utils.datetime_tz import to_display_tz, utc_now

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GCSSignedUrlStorageService(StorageService):
    bucket: str
    service_account_email: str
    signer: Signer
    expires_in: int = 900
    clock: Callable[[], datetime] = field(default=utc_now)

    async def create_upload_url(self, request: UploadUrlRequest) -> UploadUrlResult:
        # X-Goog-Date has second precision; keep expires_at consistent with it
        now = self.clock().replace(microsecond=0)
        scope = CredentialScope.from_instant(now, self.service_account_email)
        canonical = build_canonical_request(
            bucket=self.bucket,
            object_name=request.object_name,
            content_type=request.content_type,
            scope=scope,
            expires_in=self.expires_in,
        )
        string_to_sign = build_string_to_sign(scope, canonical)
        signature = await self.signer.sign(string_to_sign)
        logger.debug("Signed upload for %s at %s", request.object_name, scope.timestamp)

        return UploadUrlResult(
            upload_url=build_signed_url(
                canonical.canonical_uri, canonical.canonical_query, signature
            ),
            object_url=build_object_url(self.bucket, request.object_name),
            object_name=request.object_name,
            expires_at=to_display_tz(now + timedelta(seconds=self.expires_in)),
        )
