"""
DevCamper API - File Storage Service Tests
==========================================

What we test:
    ✅ Content type validation (images only)
    ✅ Size validation against MAX_FILE_UPLOAD
    ✅ Stored name: Photo_<id><ext>
    ✅ Writing and cleaning up files
    ✅ OS errors → FileStorageError
"""

from pathlib import Path

import pytest

from devcamper.config import Settings
from devcamper.exceptions import FileStorageError, ValidationError
from devcamper.services.file_service import FileService


class TestValidation:
    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/webp"])
    def test_images_are_accepted(self, file_service, content_type):
        """Any image/* type passes."""
        assert file_service.validate_mime_type(content_type) == content_type

    @pytest.mark.parametrize("content_type", [None, "", "application/pdf", "text/plain"])
    def test_non_images_are_rejected(self, file_service, content_type):
        """Other types raise ValidationError."""
        with pytest.raises(ValidationError, match="Please upload an image file") as exc_info:
            file_service.validate_mime_type(content_type)
        assert exc_info.value.field == "file"

    def test_size_at_limit_is_accepted(self, file_service):
        """A file exactly at the limit passes."""
        file_service.validate_size(1000)

    def test_size_over_limit_is_rejected(self, file_service):
        """One byte over the limit fails."""
        with pytest.raises(ValidationError, match="Please upload an image less than 1000"):
            file_service.validate_size(1001)


class TestPhotoName:
    def test_keeps_lowercased_extension(self):
        """The extension is kept in lower case."""
        assert FileService.photo_name("abc", "Campus.PNG") == "Photo_abc.png"

    def test_client_path_is_discarded(self):
        """Directory parts of the client name are dropped."""
        assert FileService.photo_name("abc", "../../etc/passwd.jpg") == "Photo_abc.jpg"

    def test_no_extension(self):
        """No extension gives a bare Photo_<id>."""
        assert FileService.photo_name("abc", None) == "Photo_abc"
        assert FileService.photo_name("abc", "photo") == "Photo_abc"


class TestStorage:
    @pytest.mark.asyncio
    async def test_store_photo_writes_file(self, file_service, upload_dir, sample_image_bytes):
        """The photo lands in the upload directory."""
        name = await file_service.store_photo("abc", "me.jpg", "image/jpeg", sample_image_bytes)
        assert name == "Photo_abc.jpg"
        assert (upload_dir / name).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_store_photo_replaces_previous(self, file_service, upload_dir):
        """A second upload overwrites the first."""
        await file_service.store_photo("abc", "a.jpg", "image/jpeg", b"first")
        await file_service.store_photo("abc", "b.jpg", "image/jpeg", b"second")
        assert (upload_dir / "Photo_abc.jpg").read_bytes() == b"second"
        assert len(list(upload_dir.iterdir())) == 1

    @pytest.mark.asyncio
    async def test_rejected_photo_writes_nothing(self, file_service, upload_dir):
        """A rejected photo creates no file."""
        with pytest.raises(ValidationError):
            await file_service.store_photo("abc", "a.txt", "text/plain", b"hello")
        assert not upload_dir.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file(self, file_service, upload_dir):
        """cleanup_file removes a stored file."""
        await file_service.store("Photo_x.png", b"data")
        await file_service.cleanup_file("Photo_x.png")
        assert not (upload_dir / "Photo_x.png").exists()

    @pytest.mark.asyncio
    async def test_cleanup_missing_file_is_a_no_op(self, file_service):
        """Removing a missing file is not an error."""
        await file_service.cleanup_file("Photo_missing.png")

    @pytest.mark.asyncio
    async def test_unwritable_directory(self, tmp_path):
        """A blocked upload directory raises FileStorageError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("a file where the upload directory should be")
        service = FileService(Settings(file_upload_path=str(blocker)))
        with pytest.raises(FileStorageError, match="Problem with file upload") as exc_info:
            await service.store("Photo_x.jpg", b"data")
        assert exc_info.value.status_code == 500

    def test_upload_dir_is_resolved(self, file_service, upload_dir):
        """The upload directory is stored as an absolute path."""
        assert file_service.upload_dir == Path(upload_dir).resolve()
