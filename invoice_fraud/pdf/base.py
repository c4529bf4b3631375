from abc import ABC, abstractmethod

from invoice_fraud.pdf.models import DocumentMetadata, PageLayout


class BasePdfReader(ABC):
    """Contract for all PDF parsing/rendering adapters.

    Every method raises PdfReadError if the document cannot be opened
    (corrupted, encrypted) or the requested operation fails.
    """

    @abstractmethod
    def page_texts(self, pdf_bytes: bytes, max_pages: int | None = None) -> list[str]:
        """Return the embedded text of each page.

        Text runs within a page are joined with single spaces. Only the first
        `max_pages` pages are read when a limit is given.
        """

    @abstractmethod
    def page_count(self, pdf_bytes: bytes) -> int:
        """Return the number of pages."""

    @abstractmethod
    def render_page(self, pdf_bytes: bytes, page_index: int, scale: float) -> bytes:
        """Rasterize one page to PNG bytes at `scale` x 72 dpi."""

    @abstractmethod
    def read_metadata(self, pdf_bytes: bytes) -> DocumentMetadata:
        """Read the document info dictionary."""

    @abstractmethod
    def first_page_layout(self, pdf_bytes: bytes) -> PageLayout:
        """Return positioned text runs and annotation count of page one."""
