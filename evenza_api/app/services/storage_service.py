"""
Local file storage for uploaded images and videos.

Files are written to ``settings.upload_dir/<folder>/<uuid>.<ext>`` and
served by the static mount at ``settings.upload_url_prefix``.
"""

import logging
import os
import re
import uuid
from pathlib import Path

from fastapi import UploadFile

from evenza_api.app.core.config import settings


logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    "image": {"image/jpeg": ".jpg", "image/png": ".png", "image/gif": ".gif"},
    "video": {"video/mp4": ".mp4", "video/quicktime": ".mov", "video/x-msvideo": ".avi"},
}


def get_upload_root() -> Path:
    """Resolve the upload directory; relative paths are taken from the project root."""
    if os.path.isabs(settings.upload_dir):
        return Path(settings.upload_dir)
    return Path(__file__).resolve().parents[3] / settings.upload_dir


class StorageService:

    @staticmethod
    def max_size(media_type: str) -> int:
        return settings.max_video_size if media_type == "video" else settings.max_image_size

    @classmethod
    async def save_upload(cls, file: UploadFile, media_type: str, folder: str = "general") -> str:
        """Validate and store an uploaded file, returning its public URL.

        Raises
        ------
        ValueError
            If the media type is not ``image``/``video``, the MIME type is
            not allowed for it, the file is empty or exceeds the size limit.
        """
        if media_type not in ALLOWED_TYPES:
            raise ValueError("Invalid file type. Must be 'image' or 'video'")
        allowed = ALLOWED_TYPES[media_type]
        if file.content_type not in allowed:
            raise ValueError(f"Invalid file format. Allowed: {', '.join(sorted(allowed))}")

        limit = cls.max_size(media_type)
        content = await file.read(limit + 1)
        if not content:
            raise ValueError("Uploaded file is empty")
        if len(content) > limit:
            raise ValueError(f"File too large. Maximum size is {limit // (1024 * 1024)}MB")

        folder = re.sub(r"[^\w-]", "", folder or "") or "general"
        suffix = Path(file.filename or "").suffix.lower()
        if not re.fullmatch(r"\.[a-z0-9]{1,5}", suffix):
            suffix = allowed[file.content_type]
        name = f"{uuid.uuid4().hex}{suffix}"

        target_dir = get_upload_root() / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        (target_dir / name).write_bytes(content)
        logger.info("Stored %s upload %s/%s (%d bytes)", media_type, folder, name, len(content))
        return f"{settings.upload_url_prefix.rstrip('/')}/{folder}/{name}"
