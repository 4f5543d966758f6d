from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from spotdiggz.application.errors import BadRequest
from spotdiggz.infrastructure.storage.ports import StorageService, UploadUrlRequest, UploadUrlResult

EXTENSIONS_BY_CONTENT_TYPE: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/heif": "heif",
}


@dataclass(slots=True)
class GenerateUploadUrlInput:
    content_type: str


def normalize_content_type(content_type: str) -> str:
    return content_type.strip().lower()


def extension_for_content_type(content_type: str) -> str | None:
    return EXTENSIONS_BY_CONTENT_TYPE.get(normalize_content_type(content_type))


def build_object_name(caller_id: str, extension: str) -> str:
    return f"spots/{caller_id}/{uuid4()}.{extension}"


async def execute(
    storage: StorageService,
    caller_id: str,
    payload: GenerateUploadUrlInput,
) -> UploadUrlResult:
    content_type = normalize_content_type(payload.content_type)
    extension = extension_for_content_type(content_type)
    if extension is None:
        raise BadRequest("unsupported contentType")

    request = UploadUrlRequest(
        object_name=build_object_name(caller_id, extension),
        content_type=content_type,
    )
    return await storage.create_upload_url(request)
