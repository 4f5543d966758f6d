from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from spotdiggz.application.use_cases.storage import generate_upload_url
from spotdiggz.domain.value_objects.client_type import ClientType
from spotdiggz.infrastructure.auth.context import AuthContext
from spotdiggz.infrastructure.storage.ports import StorageService
from spotdiggz.interfaces.http.deps import (
    get_auth_context,
    get_storage_service,
    require_mobile_client,
)
from spotdiggz.interfaces.http.schemas.uploads import UploadUrlRequest, UploadUrlResponse

router = APIRouter(prefix="/spots", tags=["spots"])
logger = logging.getLogger(__name__)


@router.post("/upload-url", response_model=UploadUrlResponse, response_model_by_alias=True)
async def create_upload_url(
    payload: UploadUrlRequest,
    context: AuthContext = Depends(get_auth_context),
    client: ClientType = Depends(require_mobile_client),
    storage: StorageService = Depends(get_storage_service),
) -> UploadUrlResponse:
    """Issue a signed PUT URL for one spot image.

    The client uploads the image bytes directly to Cloud Storage with the
    returned URL and the same ``Content-Type``, then stores ``objectUrl``
    on the spot.
    """
    logger.info(
        "upload url requested",
        extra={
            "user_id": context.user_id,
            "content_type": payload.content_type,
            "client": client.value,
        },
    )
    result = await generate_upload_url.execute(
        storage,
        context.user_id,
        generate_upload_url.GenerateUploadUrlInput(content_type=payload.content_type),
    )
    logger.info("upload url issued", extra={"object_name": result.object_name})
    return UploadUrlResponse(
        upload_url=result.upload_url,
        object_url=result.object_url,
        object_name=result.object_name,
        expires_at=result.expires_at,
    )
