import mimetypes
from datetime import datetime, timezone
from pathlib import Path

from invoice_fraud.documents.models import Document, detect_media_type
from invoice_fraud.processor.exceptions import FileReadError, UnsupportedDocumentTypeError


class FileLoader:
    """Reads an invoice file from disk into an immutable Document."""

    def load(self, path: Path, mime_type: str | None = None) -> Document:
        """Read document bytes and timestamps from disk.

        Raises:
            FileReadError: if the file does not exist or cannot be read.
            UnsupportedDocumentTypeError: if the file is neither PDF nor image.
        """
        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
        try:
            content = path.read_bytes()
            stat = path.stat()
        except OSError as exc:
            raise FileReadError(f"Cannot read {path}: {exc}") from exc
        if not content:
            raise FileReadError(f"File is empty: {path}")
        return self.from_bytes(
            content,
            mime_type=mime_type or "",
            filename=path.name,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )

    @staticmethod
    def from_bytes(
        content: bytes,
        *,
        mime_type: str,
        filename: str,
        last_modified: datetime | None = None,
    ) -> Document:
        """Wrap raw upload bytes into a Document.

        Raises:
            UnsupportedDocumentTypeError: if the media type cannot be determined.
        """
        media_type = detect_media_type(mime_type, filename)
        if media_type is None:
            raise UnsupportedDocumentTypeError(
                f"Unsupported document type '{mime_type}' for file '{filename}'"
            )
        return Document(
            content=content,
            media_type=media_type,
            mime_type=mime_type,
            filename=filename,
            last_modified=last_modified,
        )
