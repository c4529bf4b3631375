from invoice_fraud.documents.models import Document
from invoice_fraud.logging.logger import Log
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError

PAGE_SEPARATOR = "\n\n"


class TextLayerDetector:
    """Detects and extracts the embedded text layer of a PDF.

    Two thresholds apply: detection looks for more than
    `detection_min_chars` trimmed characters on any of the first
    `detection_pages` pages; extraction accepts the whole-file text only when
    it holds more than `extraction_min_chars` trimmed characters.
    """

    def __init__(
        self,
        pdf_reader: BasePdfReader,
        *,
        detection_min_chars: int = 10,
        detection_pages: int = 3,
        extraction_min_chars: int = 20,
    ) -> None:
        self._pdf_reader = pdf_reader
        self._detection_min_chars = detection_min_chars
        self._detection_pages = detection_pages
        self._extraction_min_chars = extraction_min_chars

    def has_text_layer(self, document: Document) -> bool:
        if not document.is_pdf:
            return False
        try:
            pages = self._pdf_reader.page_texts(
                document.content, max_pages=self._detection_pages
            )
        except PdfReadError as exc:
            Log.warning(f"Text layer detection failed, assuming none: {exc}")
            return False
        return any(len(text.strip()) > self._detection_min_chars for text in pages)

    def extract_text(self, document: Document) -> str | None:
        """Return the full text layer, or None if absent, too short, or unreadable."""
        if not document.is_pdf:
            return None
        try:
            pages = self._pdf_reader.page_texts(document.content)
        except PdfReadError as exc:
            Log.warning(f"Text layer extraction failed, falling back to OCR: {exc}")
            return None
        text = PAGE_SEPARATOR.join(pages).strip()
        if len(text) <= self._extraction_min_chars:
            Log.info(
                "Text layer below extraction threshold",
                chars=len(text),
                threshold=self._extraction_min_chars,
            )
            return None
        return text
