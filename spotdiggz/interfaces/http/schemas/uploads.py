from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UploadUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content_type: str = Field(alias="contentType", examples=["image/jpeg", "image/png"])


class UploadUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(alias="uploadUrl")
    object_url: str = Field(alias="objectUrl")
    object_name: str = Field(alias="objectName")
    expires_at: datetime = Field(alias="expiresAt")
