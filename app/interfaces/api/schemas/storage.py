"""Pydantic models for object storage endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SignedUrlRequest(BaseModel):
    """File that the client is about to upload."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName", min_length=1)
    content_type: str = Field(..., alias="contentType", min_length=1)


class SignedUrlRead(BaseModel):
    """Upload URL and the URL the uploaded image will be served from."""

    model_config = ConfigDict(populate_by_name=True)

    signed_upload_url: str = Field(..., serialization_alias="signedUploadUrl")
    image_url: str = Field(..., serialization_alias="imageUrl")


__all__ = ["SignedUrlRequest", "SignedUrlRead"]
