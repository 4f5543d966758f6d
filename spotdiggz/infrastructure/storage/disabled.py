from __future__ import annotations

from spotdiggz.application.errors import StorageNotConfiguredError
from spotdiggz.infrastructure.storage.ports import StorageService, UploadUrlRequest, UploadUrlResult


class DisabledStorageService(StorageService):
    """Stands in when no bucket or signer identity is configured."""

    async def create_upload_url(self, request: UploadUrlRequest) -> UploadUrlResult:
        raise StorageNotConfiguredError(
            "Storage is not configured", details={"object_name": request.object_name}
        )
