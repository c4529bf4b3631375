from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import PurePath

GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})
IMAGE_EXTENSIONS = frozenset(
    {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}
)


class MediaType(str, Enum):
    PDF = "pdf"
    IMAGE = "image"


def detect_media_type(mime_type: str, filename: str) -> MediaType | None:
    """Classify a document as PDF or image.

    The declared MIME type wins; the filename extension is only consulted when
    the MIME type is absent or generic.
    """
    mime = (mime_type or "").strip().lower()
    if mime == "application/pdf":
        return MediaType.PDF
    if mime.startswith("image/"):
        return MediaType.IMAGE
    if mime not in GENERIC_MIME_TYPES:
        return None
    suffix = PurePath(filename or "").suffix.lower()
    if suffix == ".pdf":
        return MediaType.PDF
    if suffix in IMAGE_EXTENSIONS:
        return MediaType.IMAGE
    return None


@dataclass(frozen=True)
class Document:
    """An uploaded invoice file. Never mutated by the pipeline."""

    content: bytes = field(repr=False)
    media_type: MediaType
    mime_type: str = ""
    filename: str = ""
    last_modified: datetime | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def is_pdf(self) -> bool:
        return self.media_type is MediaType.PDF
