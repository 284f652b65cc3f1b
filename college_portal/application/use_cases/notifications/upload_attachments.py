"""Use case for storing files that notifications will reference."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from college_portal.domain.entities import ROLE_ADMIN, ROLE_TEACHER, Attachment, Viewer
from college_portal.domain.exceptions import FieldError, ForbiddenError, ValidationError
from college_portal.infrastructure.storage import upload_attachment

logger = logging.getLogger(__name__)

MAX_ATTACHMENTS = 5

AttachmentStore = Callable[..., Attachment]


@dataclass(frozen=True)
class AttachmentUpload:
    file_name: str
    data: bytes
    content_type: str | None = None


def upload_attachments(
    files: Sequence[AttachmentUpload],
    *,
    uploader: Viewer,
    store: AttachmentStore = upload_attachment,
) -> list[Attachment]:
    """Store up to five files and return the metadata clients attach to notifications."""

    if uploader.role not in (ROLE_TEACHER, ROLE_ADMIN):
        raise ForbiddenError("Only teachers and admins can upload attachments")
    if not files:
        raise ValidationError([FieldError("files", "At least one file is required")])
    if len(files) > MAX_ATTACHMENTS:
        raise ValidationError(
            [FieldError("files", f"At most {MAX_ATTACHMENTS} files can be uploaded at once")]
        )

    attachments = [
        store(upload.file_name, upload.data, content_type=upload.content_type)
        for upload in files
    ]
    logger.info("User %s uploaded %d attachment(s)", uploader.id, len(attachments))
    return attachments
