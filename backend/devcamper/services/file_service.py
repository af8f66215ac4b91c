"""
DevCamper API - File Storage Service
====================================

What:  Validates and stores bootcamp photo uploads.
How:   Checks the declared content type and the size, then writes the bytes
       to the upload directory as `Photo_<bootcampId><ext>`.
Who:   Called by BootcampService.upload_photo().

Validation order:
    1. Content type starts with "image"   → otherwise 400, nothing written
    2. Size is at most MAX_FILE_UPLOAD    → otherwise 400, nothing written
    3. Write to FILE_UPLOAD_PATH          → OSError becomes 500 "Problem with file upload"

The stored filename is built from the bootcamp id and the original
extension only, so no other part of the client's filename reaches the disk.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from devcamper.config import Settings
from devcamper.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)


class FileService:
    """
    Manages photo validation and storage for bootcamps.

    Directory Structure:
        public/uploads/
        ├── Photo_5d713995-b721-c3a7-0000-000000000001.jpg
        └── Photo_5d713a66-ec8f-2b6d-0000-000000000002.png

    A new upload for the same bootcamp with the same extension replaces the
    previous file.
    """

    def __init__(self, settings: Settings):
        self.upload_dir = Path(settings.file_upload_path).resolve()
        self.max_size = settings.max_file_upload

    def validate_mime_type(self, content_type: Optional[str]) -> str:
        """
        Raises:
            ValidationError: the upload is not declared as an image
        """
        if not content_type or not content_type.startswith("image"):
            raise ValidationError(
                message="Please upload an image file",
                field="file",
                context={"content_type": content_type},
            )
        return content_type

    def validate_size(self, actual_size: int) -> None:
        if actual_size > self.max_size:
            raise ValidationError(
                message=f"Please upload an image less than {self.max_size}",
                field="file",
                context={"max_size": self.max_size, "actual_size": actual_size},
            )

    @staticmethod
    def photo_name(bootcamp_id: str, filename: Optional[str]) -> str:
        """`Photo_<id><ext>`, where ext is the original extension, lowercased."""
        extension = Path(filename or "").suffix.lower()
        return f"Photo_{bootcamp_id}{extension}"

    async def store(self, name: str, content: bytes) -> Path:
        """
        Write validated content to the upload directory.

        Raises:
            FileStorageError: the directory could not be created or the write failed
        """
        path = self.upload_dir / name
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", path, str(e))
            raise FileStorageError(context={"path": str(path), "os_error": str(e)})

        logger.info("File stored: %s (%d bytes)", name, len(content))
        return path

    async def store_photo(
        self,
        bootcamp_id: str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> str:
        """
        Validate and store a bootcamp photo.

        Returns:
            The stored filename (what the bootcamp's `photo` field is set to)
        """
        self.validate_mime_type(content_type)
        self.validate_size(len(content))

        name = self.photo_name(bootcamp_id, filename)
        await self.store(name, content)
        return name

    async def cleanup_file(self, name: str) -> None:
        """Remove a stored file; used when persisting the new photo name fails."""
        path = self.upload_dir / name
        try:
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", name, str(e))
