"""
Local media reader: memory-maps an image or video file and captures its bytes,
declared MIME type and SHA-256.
"""

from __future__ import annotations

import hashlib
import mimetypes
import mmap
import os
from dataclasses import dataclass
from typing import Optional

MEDIA_KINDS = ("image", "video")


class MediaReadError(OSError):
    """Raised when a media file cannot be read or is not an image/video."""


@dataclass(frozen=True)
class MediaUpload:
    """Raw media ready for analysis.

    Attributes:
        path: Source path on disk.
        data: Encoded media bytes.
        mime_type: Declared MIME type, e.g. 'image/png'.
        kind: 'image' or 'video'.
        sha256_hex: Digest of `data`, for display next to the simulated chain.
    """

    path: str
    data: bytes
    mime_type: str
    kind: str
    sha256_hex: str

    @property
    def size(self) -> int:
        return len(self.data)


def media_kind(mime_type: str) -> Optional[str]:
    """Map a MIME type to 'image' / 'video', or None if neither."""
    major = mime_type.split("/", 1)[0].lower()
    return major if major in MEDIA_KINDS else None


def _read_bytes(path: str) -> bytes:
    size = os.path.getsize(path)
    if size == 0:
        # mmap refuses zero-length mappings
        return b""
    fd = os.open(path, os.O_RDONLY)
    try:
        with mmap.mmap(fd, size, access=mmap.ACCESS_READ) as m:
            with memoryview(m) as mv:
                return mv.tobytes()
    finally:
        os.close(fd)


def read_media(path: str, mime_type: Optional[str] = None) -> MediaUpload:
    """Read a local image or video file.

    Args:
        path: File to read.
        mime_type: Declared type; guessed from the file name when omitted.

    Raises:
        MediaReadError: the file is missing, unreadable, empty, or not an
            image/video type.
    """
    if not os.path.isfile(path):
        raise MediaReadError(f"File not found: {path}")

    declared = mime_type or mimetypes.guess_type(path)[0]
    if not declared:
        raise MediaReadError(f"Cannot determine media type of {path}")
    kind = media_kind(declared)
    if kind is None:
        raise MediaReadError(f"Unsupported media type {declared!r}; expected image/* or video/*")

    try:
        data = _read_bytes(path)
    except OSError as e:
        raise MediaReadError(f"Failed to read {path}: {e}") from e
    if not data:
        raise MediaReadError(f"File is empty: {path}")

    return MediaUpload(
        path=path,
        data=data,
        mime_type=declared,
        kind=kind,
        sha256_hex=hashlib.sha256(data).hexdigest(),
    )
