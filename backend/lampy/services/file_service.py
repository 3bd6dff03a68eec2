"""
LAMPY Backend - Upload Storage Service
======================================

What:  Validates and writes uploaded photos/documents to the local uploads
       tree, and resolves served paths (profile photos only) back to files.
How:   Async writes with aiofiles into a directory per purpose.
Who:   User service (profile photo), verification service (photo and age
       documents), and the /uploads file route.

Directory Structure:
    uploads/
    ├── profiles/           profile_<user>_<unix>_<name>            (served)
    ├── verification/       verification_<user>_<unix>_<name>
    └── age_verification/   age_verification_<user>_<unix>_<name>

Naming:
    Files are named from the user id, the upload second and the client's
    filename. Two uploads of the same filename by the same user within one
    second overwrite each other; that is accepted for this scope. The client
    filename is reduced to its basename so it can never leave the purpose
    directory.

The stored *reference* (saved on the user row / verification request) is
`uploads/<purpose>/<file>`; the public URL is `/uploads/<purpose>/<file>`.
"""

import logging
import os
import time
from pathlib import Path, PurePath
from typing import Optional, Tuple

import aiofiles

from lampy.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Purpose directory → filename prefix
PURPOSE_PROFILES = "profiles"
PURPOSE_VERIFICATION = "verification"
PURPOSE_AGE_VERIFICATION = "age_verification"

FILENAME_PREFIXES = {
    PURPOSE_PROFILES: "profile",
    PURPOSE_VERIFICATION: "verification",
    PURPOSE_AGE_VERIFICATION: "age_verification",
}

PUBLIC_PREFIX = "uploads"

# Only profile photos are served over HTTP; ID documents stay on disk for admins
SERVED_PURPOSES = frozenset({PURPOSE_PROFILES})


class FileService:
    """
    Stores uploads under `upload_root`, one subdirectory per purpose.

    Lifecycle of an upload:
        1. Route reads the multipart field into memory
        2. validate_size() rejects empty or oversized content
        3. store() writes <root>/<purpose>/<prefix>_<user>_<unix>_<basename>
        4. The caller records the returned reference in the database
        5. If the database write fails, cleanup_file() removes the file
    """

    def __init__(self, upload_root: str, max_upload_size: int):
        self.upload_root = Path(upload_root).resolve()
        self.max_upload_size = max_upload_size
        self.upload_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_root=%s", self.upload_root)

    def validate_size(self, content: bytes, label: str = "file") -> None:
        """
        Reject empty uploads and anything above `max_upload_size`.

        Raises:
            ValidationError with a size message naming the field
        """
        if not content:
            raise ValidationError(message=f"Uploaded {label} is empty", field=label)

        if len(content) > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=f"Uploaded {label} is too large (max {max_mb:.0f}MB)",
                field=label,
                context={"actual_size": len(content), "max_size": self.max_upload_size},
            )

    @staticmethod
    def sanitize_filename(filename: Optional[str]) -> str:
        """
        Reduce a client-supplied filename to a safe basename.

        "../../etc/passwd" → "passwd", "C:\\photos\\me.jpg" → "me.jpg",
        blank → "upload".
        """
        if not filename:
            return "upload"
        # Handle both separators regardless of the server OS
        name = PurePath(filename.replace("\\", "/")).name.strip()
        if name in ("", ".", ".."):
            return "upload"
        return name

    def build_filename(self, purpose: str, user_id: int, filename: Optional[str]) -> str:
        if purpose not in FILENAME_PREFIXES:
            raise ValueError(f"Unknown upload purpose: {purpose}")
        prefix = FILENAME_PREFIXES[purpose]
        return f"{prefix}_{user_id}_{int(time.time())}_{self.sanitize_filename(filename)}"

    async def store(
        self,
        purpose: str,
        user_id: int,
        filename: Optional[str],
        content: bytes,
    ) -> Tuple[str, str]:
        """
        Validate and write an upload.

        Returns:
            (absolute_path, reference) where reference is "uploads/<purpose>/<file>"

        Raises:
            ValidationError: empty or oversized content
            FileStorageError: directory creation or write failed
        """
        self.validate_size(content)

        name = self.build_filename(purpose, user_id, filename)
        directory = self.upload_root / purpose
        absolute_path = directory / name

        try:
            directory.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        reference = f"{PUBLIC_PREFIX}/{purpose}/{name}"
        logger.info("Upload stored: %s (%d bytes)", reference, len(content))
        return str(absolute_path), reference

    @staticmethod
    def public_url(reference: str) -> str:
        """"uploads/profiles/x.jpg" → "/uploads/profiles/x.jpg"."""
        return "/" + reference.lstrip("/")

    def resolve(self, relative_path: str) -> Path:
        """
        Map a served path (`profiles/<file>`) to a file on disk.

        Verification and age-verification artifacts are never served and
        answer exactly like a missing file.

        Raises:
            ValidationError: path escapes the uploads root (../ traversal)
            NotFoundError: no such file, or not in a served purpose directory
        """
        full_path = (self.upload_root / relative_path).resolve()
        if full_path != self.upload_root and self.upload_root not in full_path.parents:
            raise ValidationError(message="Invalid file path", field="path")
        if not any(self.upload_root / purpose in full_path.parents for purpose in SERVED_PURPOSES):
            raise NotFoundError(resource="File", resource_id=relative_path)
        if not full_path.is_file():
            raise NotFoundError(resource="File", resource_id=relative_path)
        return full_path

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored upload after a failed database write.

        Failures are logged, not raised: the request is already failing and
        an orphaned file is harmless.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))
