from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True, slots=True)
class UploadUrlRequest:
    object_name: str
    content_type: str


@dataclass(frozen=True, slots=True)
class UploadUrlResult:
    upload_url: str
    object_url: str
    object_name: str
    expires_at: datetime


class StorageService(Protocol):
    async def create_upload_url(self, request: UploadUrlRequest) -> UploadUrlResult: ...
