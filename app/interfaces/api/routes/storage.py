"""Signed upload URLs for event images."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, status

from app.infrastructure.storage import generate_upload_signed_url, get_container_metadata
from app.interfaces.api.schemas import SignedUrlRead, SignedUrlRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["storage"])


@router.post("/signedurl", response_model=SignedUrlRead)
def create_signed_url(payload: SignedUrlRequest) -> SignedUrlRead:
    """Return a short-lived URL the client can upload ``fileName`` to."""

    try:
        signed_upload_url, image_url = generate_upload_signed_url(
            payload.file_name, payload.content_type
        )
    except Exception as exc:
        logger.exception("Could not sign upload URL for %s", payload.file_name)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request"
        ) from exc
    return SignedUrlRead(signed_upload_url=signed_upload_url, image_url=image_url)


@router.get("/bucketmetadata")
def read_bucket_metadata() -> dict[str, Any]:
    """Return the properties of the upload container."""

    try:
        return get_container_metadata()
    except Exception as exc:
        logger.exception("Could not read container metadata")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad Request"
        ) from exc


__all__ = ["router"]
