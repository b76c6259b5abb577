"""Pydantic schemas for image uploads.

- StoredFile: a file written to the storage directory
- UploadResponse: API response after a successful upload

Stored files are named ``<uuid><extension>`` where the extension is copied
from the client's filename. It is the only client-controlled part of the name.
"""

from pydantic import BaseModel, Field

_UNSAFE_EXTENSION_CHARS = ("/", "\\", "\x00")


def extension_from_filename(filename: str) -> str:
    """Return the suffix of ``filename`` from its last ``.``, dot included.

    Unlike ``Path.suffix`` this keeps odd suffixes verbatim (``"a."`` gives
    ``"."``, ``".keep"`` gives ``".keep"``). A filename without a dot has no
    extension. An extension that could name another directory is dropped.

    Examples:
        >>> extension_from_filename("photo.jpg")
        '.jpg'
        >>> extension_from_filename("archive.tar.gz")
        '.gz'
        >>> extension_from_filename("README")
        ''
    """
    index = filename.rfind(".")
    if index == -1:
        return ""
    extension = filename[index:]
    if any(char in extension for char in _UNSAFE_EXTENSION_CHARS):
        return ""
    return extension


class StoredFile(BaseModel):
    """A file persisted by an upload."""
    identifier: str = Field(..., description="Random UUID used as the base name")
    extension: str = Field("", description="Suffix copied from the original filename")
    mime_type: str = Field(..., description="Declared MIME type")
    size_bytes: int = Field(..., description="File size in bytes")

    @property
    def stored_filename(self) -> str:
        return f"{self.identifier}{self.extension}"


class UploadResponse(BaseModel):
    """Response body of POST /upload."""
    url: str = Field(..., description="Public URL of the stored file")
