"""
GarageDash Server - File Content Gateway

This module moves object bytes in and out of the archive bucket:
- Streaming reads with content type and size from store metadata
- Whole-buffer and streamed writes
- Text updates from the browser editor
- Content type guessing from the filename extension

Writes absorb transient replication errors the same way soft deletes do.
"""

import logging
from typing import BinaryIO, Optional, Union

from errors import ValidationError, TolerateReplicationLag
from models.infrastructure import ObjectStream

logger = logging.getLogger(__name__)


DEFAULT_MIME_TYPE = "application/octet-stream"
TEXT_MIME_TYPE = "text/plain"

# Extension (lowercase, no dot) -> MIME type
MIME_TYPES = {
    # Images
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    # Documents
    "pdf": "application/pdf",
    "txt": "text/plain",
    "md": "text/markdown",
    "html": "text/html",
    "css": "text/css",
    "js": "text/javascript",
    "json": "application/json",
    # Video
    "mp4": "video/mp4",
    "webm": "video/webm",
    "mov": "video/quicktime",
    # Audio
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    # Archives
    "zip": "application/zip",
    "tar": "application/x-tar",
    "gz": "application/gzip",
}

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


# ==================== Content Type Helpers ====================

def GuessMimeType(filename: str) -> str:
    """
    Guess a MIME type from the filename extension (case-insensitive)

    Only the final path segment is considered, so dots in folder names
    never count as an extension.

    Args:
        filename: File name or full object key

    Returns:
        str: MIME type, DEFAULT_MIME_TYPE when the extension is unknown or absent
    """
    name = filename.rsplit("/", 1)[-1]
    if "." not in name:
        return DEFAULT_MIME_TYPE
    extension = name.rsplit(".", 1)[-1].lower()
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)


def IsImage(mime_type: str) -> bool:
    """Check if a MIME type can be shown as a thumbnail"""
    return mime_type.startswith("image/")


def IsTextFile(mime_type: str) -> bool:
    """Check if a MIME type can be edited as text"""
    return mime_type.startswith("text/") or mime_type == "application/json"


def FormatSize(size_bytes: int) -> str:
    """
    Format a byte count for display using 1024-based units

    Examples: 0 -> "0 B", 1536 -> "1.5 KB", 500000 -> "488.3 KB"
    """
    if size_bytes <= 0:
        return "0 B"

    value = float(size_bytes)
    unit_index = 0
    while value >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1024
        unit_index += 1

    formatted = f"{value:.1f}".rstrip("0").rstrip(".")
    return f"{formatted} {SIZE_UNITS[unit_index]}"


# ==================== Read / Write ====================

def ReadObject(store, key: str) -> ObjectStream:
    """
    Open an archived object for streaming

    The caller owns the returned stream and must iterate it fully or call
    Close(); both release the underlying connection.

    Args:
        store: StoreManager (or any object with the same capability)
        key: Full object key

    Returns:
        ObjectStream with content_type and size from store metadata

    Raises:
        StoreNotFoundError: If nothing is stored at key
    """
    stream = store.GetObject(store.archive_bucket, key)
    logger.debug(f"Opened '{key}' for reading ({stream.size} bytes, {stream.content_type})")
    return stream


def WriteObject(store, key: str, data: Union[bytes, bytearray], content_type: Optional[str] = None) -> str:
    """
    Write a whole buffer to key

    Args:
        store: StoreManager
        key: Full object key
        data: Payload
        content_type: Explicit content type; guessed from key when omitted

    Returns:
        str: The content type that was stored
    """
    resolved_type = content_type or GuessMimeType(key)

    with TolerateReplicationLag("put", key):
        store.PutObject(store.archive_bucket, key, bytes(data), resolved_type)

    logger.info(f"Stored '{key}' ({len(data)} bytes, {resolved_type})")
    return resolved_type


def WriteStream(store, key: str, fileobj: BinaryIO, content_type: Optional[str] = None) -> str:
    """
    Write a file-like object to key without loading it fully into memory

    Args:
        store: StoreManager
        key: Full object key
        fileobj: Readable binary stream positioned at the start of the payload
        content_type: Explicit content type; guessed from key when omitted

    Returns:
        str: The content type that was stored
    """
    resolved_type = content_type or GuessMimeType(key)

    with TolerateReplicationLag("upload", key):
        store.UploadStream(store.archive_bucket, key, fileobj, resolved_type)

    logger.info(f"Uploaded '{key}' ({resolved_type})")
    return resolved_type


def WriteText(store, key: str, content) -> None:
    """
    Replace key with UTF-8 text from the browser editor

    Raises:
        ValidationError: If content is not a string (no store call is made)
    """
    if not isinstance(content, str):
        raise ValidationError("Content must be a string")

    WriteObject(store, key, content.encode("utf-8"), TEXT_MIME_TYPE)
