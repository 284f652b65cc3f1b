"""Azure Blob Storage utilities for notification attachments."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from uuid import uuid4

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import BlobServiceClient, ContentSettings

from college_portal.config import get_settings
from college_portal.domain.entities import Attachment
from college_portal.domain.exceptions import StorageError

logger = logging.getLogger(__name__)

_ATTACHMENT_PREFIX = "notifications"
_UNSAFE_CHARACTERS = re.compile(r"[^A-Za-z0-9._-]+")


@lru_cache
def _get_blob_service_client() -> BlobServiceClient:
    settings = get_settings()
    if not settings.azure_storage_connection_string:
        msg = "Azure storage connection string is not configured"
        raise StorageError(msg)
    return BlobServiceClient.from_connection_string(
        settings.azure_storage_connection_string
    )


@lru_cache
def _get_container_name() -> str:
    settings = get_settings()
    if not settings.azure_storage_container_name:
        msg = "Azure storage container name is not configured"
        raise StorageError(msg)
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


def _safe_file_name(file_name: str) -> str:
    cleaned = _UNSAFE_CHARACTERS.sub("_", file_name.strip()).strip("._")
    return cleaned or "attachment"


def upload_attachment(
    file_name: str,
    data: bytes,
    *,
    content_type: str | None = None,
) -> Attachment:
    """Store ``data`` as a new blob and describe it as an :class:`Attachment`."""

    blob_path = f"{_ATTACHMENT_PREFIX}/{uuid4().hex}/{_safe_file_name(file_name)}"
    try:
        container_client = _get_container_client()
        blob_client = container_client.get_blob_client(blob_path)
        content_settings = None
        if content_type is not None:
            content_settings = ContentSettings(content_type=content_type)
        blob_client.upload_blob(data, overwrite=True, content_settings=content_settings)
    except AzureError as exc:
        logger.error("Failed to upload attachment %s: %s", file_name, exc)
        raise StorageError(f"Could not store attachment {file_name}") from exc

    return Attachment(
        file_name=file_name,
        file_url=blob_client.url,
        file_type=content_type,
        file_size=len(data),
    )


__all__ = ["upload_attachment"]
