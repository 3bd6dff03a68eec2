"""
LAMPY Backend - Upload Storage Unit Tests
=========================================

Covers size limits, filename sanitization, naming, on-disk layout, path
resolution for serving, and cleanup.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from lampy.exceptions import FileStorageError, NotFoundError, ValidationError
from lampy.services.file_service import (
    PURPOSE_AGE_VERIFICATION,
    PURPOSE_PROFILES,
    PURPOSE_VERIFICATION,
    FileService,
)


@pytest.fixture
def service(tmp_path):
    return FileService(upload_root=str(tmp_path / "uploads"), max_upload_size=1024)


class TestSizeValidation:

    def test_within_limit(self, service):
        service.validate_size(b"x" * 1024)

    def test_over_limit(self, service):
        with pytest.raises(ValidationError, match="too large"):
            service.validate_size(b"x" * 1025)

    def test_empty(self, service):
        with pytest.raises(ValidationError, match="empty"):
            service.validate_size(b"")


class TestFilenames:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("me.jpg", "me.jpg"),
            ("../../etc/passwd", "passwd"),
            ("C:\\photos\\me.jpg", "me.jpg"),
            ("/abs/path/id.png", "id.png"),
            ("", "upload"),
            (None, "upload"),
            ("..", "upload"),
            ("dir/", "dir"),
        ],
    )
    def test_sanitize(self, raw, expected):
        assert FileService.sanitize_filename(raw) == expected

    @pytest.mark.parametrize(
        "purpose, prefix",
        [
            (PURPOSE_PROFILES, "profile"),
            (PURPOSE_VERIFICATION, "verification"),
            (PURPOSE_AGE_VERIFICATION, "age_verification"),
        ],
    )
    def test_build_filename(self, service, purpose, prefix):
        with patch("lampy.services.file_service.time.time", return_value=1700000000.7):
            name = service.build_filename(purpose, 7, "me.jpg")
        assert name == f"{prefix}_7_1700000000_me.jpg"

    def test_unknown_purpose(self, service):
        with pytest.raises(ValueError):
            service.build_filename("avatars", 1, "me.jpg")


class TestStore:

    @pytest.mark.asyncio
    async def test_store_writes_under_purpose_directory(self, service, sample_image_bytes):
        absolute_path, reference = await service.store(
            PURPOSE_VERIFICATION, 3, "selfie.jpg", sample_image_bytes
        )

        path = Path(absolute_path)
        assert path.parent == service.upload_root / PURPOSE_VERIFICATION
        assert path.read_bytes() == sample_image_bytes
        assert reference == f"uploads/verification/{path.name}"
        assert path.name.startswith("verification_3_")
        assert path.name.endswith("_selfie.jpg")

    @pytest.mark.asyncio
    async def test_store_rejects_empty_before_writing(self, service):
        with pytest.raises(ValidationError):
            await service.store(PURPOSE_PROFILES, 1, "me.jpg", b"")
        assert not (service.upload_root / PURPOSE_PROFILES).exists()

    @pytest.mark.asyncio
    async def test_store_wraps_os_errors(self, service, sample_image_bytes):
        with patch("lampy.services.file_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await service.store(PURPOSE_PROFILES, 1, "me.jpg", sample_image_bytes)

    def test_public_url(self):
        assert FileService.public_url("uploads/profiles/a.jpg") == "/uploads/profiles/a.jpg"


class TestResolve:

    @pytest.mark.asyncio
    async def test_resolves_stored_file(self, service, sample_image_bytes):
        absolute_path, reference = await service.store(
            PURPOSE_PROFILES, 1, "me.jpg", sample_image_bytes
        )
        relative = reference.split("/", 1)[1]
        assert service.resolve(relative) == Path(absolute_path)

    def test_traversal_rejected(self, service):
        with pytest.raises(ValidationError):
            service.resolve("../outside.txt")

    def test_missing_file(self, service):
        with pytest.raises(NotFoundError):
            service.resolve("profiles/nope.jpg")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("purpose", [PURPOSE_VERIFICATION, PURPOSE_AGE_VERIFICATION])
    async def test_verification_artifacts_not_served(self, service, sample_image_bytes, purpose):
        absolute_path, reference = await service.store(purpose, 1, "id.jpg", sample_image_bytes)
        relative = reference.split("/", 1)[1]

        with pytest.raises(NotFoundError):
            service.resolve(relative)
        assert Path(absolute_path).is_file()

    @pytest.mark.asyncio
    async def test_cannot_reach_artifacts_through_profiles(self, service, sample_image_bytes):
        _, reference = await service.store(PURPOSE_AGE_VERIFICATION, 1, "id.jpg", sample_image_bytes)
        name = reference.rsplit("/", 1)[1]

        with pytest.raises(NotFoundError):
            service.resolve(f"profiles/../{PURPOSE_AGE_VERIFICATION}/{name}")


class TestCleanup:

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, service, tmp_path):
        test_file = tmp_path / "test.jpg"
        test_file.write_bytes(b"test content")

        await service.cleanup_file(str(test_file))
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, service, tmp_path):
        await service.cleanup_file(str(tmp_path / "nonexistent.jpg"))
