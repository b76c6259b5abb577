"""File storage service for Imagedrop.

Handles file storage on disk. Files are stored flat in the upload directory
as ``{uuid}{ext}`` next to a sentinel file that is never deleted.
"""
import asyncio
import logging
from pathlib import Path
from typing import Optional

from imagedrop.config import StorageSettings

from .identifiers import generate_identifier
from .retention import RetentionSweeper
from .schemas import StoredFile, extension_from_filename

logger = logging.getLogger(__name__)


class FileStorageService:
    """Service for writing, locating and expiring uploaded files."""

    def __init__(self, settings: StorageSettings) -> None:
        self.settings = settings
        self.upload_dir = Path(settings.upload_dir)
        self.sweeper = RetentionSweeper(
            directory=self.upload_dir,
            retention_seconds=settings.retention_seconds,
            sentinel_name=settings.sentinel_name,
        )

    def ensure_upload_dir(self) -> None:
        """Create the upload directory and its sentinel file if missing."""
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        sentinel = self.upload_dir / self.settings.sentinel_name
        if not sentinel.exists():
            sentinel.touch()
            logger.info("Created sentinel file: %s", sentinel)

    async def save_file(self, filename: str, content: bytes, mime_type: str) -> StoredFile:
        """Write an uploaded file to disk under a fresh random name.

        Args:
            filename: Original filename, only its extension is kept
            content: File content as bytes
            mime_type: Declared MIME type

        Returns:
            StoredFile describing what was written
        """
        stored = StoredFile(
            identifier=generate_identifier(),
            extension=extension_from_filename(filename),
            mime_type=mime_type,
            size_bytes=len(content),
        )
        file_path = self.upload_dir / stored.stored_filename
        await asyncio.to_thread(file_path.write_bytes, content)

        logger.info(f"Saved file: {file_path} ({stored.size_bytes} bytes)")
        return stored

    def resolve(self, relative_path: str) -> Optional[Path]:
        """Map a request path below /uploads to a stored file.

        Returns None when the target does not exist, is not a regular file,
        or resolves outside the upload directory (``../`` segments, symlinks).
        """
        root = self.upload_dir.resolve()
        candidate = (root / relative_path).resolve()
        if not candidate.is_relative_to(root):
            logger.warning("Rejected path outside upload directory: %s", relative_path)
            return None
        if not candidate.is_file():
            return None
        return candidate
