"""Azure Blob Storage utilities for uploaded images."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import BlobSasPermissions, BlobServiceClient, generate_blob_sas

from app.config import get_settings

UPLOAD_URL_LIFETIME = timedelta(minutes=15)


@lru_cache
def _get_blob_service_client() -> BlobServiceClient:
    settings = get_settings()
    if not settings.azure_storage_connection_string:
        msg = "Azure storage connection string is not configured"
        raise RuntimeError(msg)
    return BlobServiceClient.from_connection_string(
        settings.azure_storage_connection_string
    )


@lru_cache
def _get_container_name() -> str:
    settings = get_settings()
    if not settings.azure_storage_container_name:
        msg = "Azure storage container name is not configured"
        raise RuntimeError(msg)
    return settings.azure_storage_container_name


@lru_cache
def _get_container_client():
    service_client = _get_blob_service_client()
    container_name = _get_container_name()
    try:
        service_client.create_container(container_name)
    except ResourceExistsError:
        pass
    return service_client.get_container_client(container_name)


def generate_upload_signed_url(file_name: str, content_type: str) -> tuple[str, str]:
    """Return a write-only SAS URL for ``file_name`` and the public blob URL.

    The SAS pins ``content_type`` and expires after :data:`UPLOAD_URL_LIFETIME`.
    """

    service_client = _get_blob_service_client()
    blob_client = _get_container_client().get_blob_client(file_name)
    account_key = getattr(service_client.credential, "account_key", None)
    if not account_key:
        msg = "Azure storage credentials cannot sign URLs"
        raise RuntimeError(msg)

    sas_token = generate_blob_sas(
        account_name=service_client.account_name,
        container_name=_get_container_name(),
        blob_name=file_name,
        account_key=account_key,
        permission=BlobSasPermissions(create=True, write=True),
        expiry=datetime.now(timezone.utc) + UPLOAD_URL_LIFETIME,
        content_type=content_type,
    )
    return f"{blob_client.url}?{sas_token}", blob_client.url


def get_container_metadata() -> dict[str, Any]:
    """Return the properties of the upload container."""

    properties = _get_container_client().get_container_properties()
    last_modified = properties.last_modified
    return {
        "name": properties.name,
        "lastModified": last_modified.isoformat() if last_modified else None,
        "publicAccess": properties.public_access,
        "metadata": dict(properties.metadata or {}),
    }


__all__ = ["generate_upload_signed_url", "get_container_metadata"]
