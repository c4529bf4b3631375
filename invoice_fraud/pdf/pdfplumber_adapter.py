import io
from typing import Any

import pdfplumber

from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.dates import parse_pdf_date
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.pdf.models import DocumentMetadata, PageLayout, TextRun

_POINTS_PER_INCH = 72


def _metadata_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip()
    return text or None


class PdfPlumberAdapter(BasePdfReader):
    """Reads and renders PDFs using pdfplumber (pdfminer + pypdfium2)."""

    def page_texts(self, pdf_bytes: bytes, max_pages: int | None = None) -> list[str]:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = pdf.pages if max_pages is None else pdf.pages[:max_pages]
                return [
                    " ".join(word["text"] for word in page.extract_words())
                    for page in pages
                ]
        except Exception as exc:
            raise PdfReadError(f"pdfplumber text extraction failed: {exc}") from exc

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return len(pdf.pages)
        except Exception as exc:
            raise PdfReadError(f"pdfplumber page count failed: {exc}") from exc

    def render_page(self, pdf_bytes: bytes, page_index: int, scale: float) -> bytes:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                page_image = pdf.pages[page_index].to_image(
                    resolution=int(_POINTS_PER_INCH * scale)
                )
                buf = io.BytesIO()
                page_image.original.save(buf, format="PNG")
                return buf.getvalue()
        except Exception as exc:
            raise PdfReadError(
                f"pdfplumber rendering of page {page_index + 1} failed: {exc}"
            ) from exc

    def read_metadata(self, pdf_bytes: bytes) -> DocumentMetadata:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                info = dict(pdf.metadata or {})
        except Exception as exc:
            raise PdfReadError(f"pdfplumber metadata read failed: {exc}") from exc
        return DocumentMetadata(
            creation_date=parse_pdf_date(info.get("CreationDate")),
            modification_date=parse_pdf_date(info.get("ModDate")),
            creator=_metadata_text(info.get("Creator")),
            producer=_metadata_text(info.get("Producer")),
            title=_metadata_text(info.get("Title")),
            subject=_metadata_text(info.get("Subject")),
            author=_metadata_text(info.get("Author")),
            keywords=_metadata_text(info.get("Keywords")),
        )

    def first_page_layout(self, pdf_bytes: bytes) -> PageLayout:
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not pdf.pages:
                    return PageLayout()
                page = pdf.pages[0]
                words = page.extract_words(extra_attrs=["fontname", "size"])
                annotation_count = len(page.annots or [])
        except Exception as exc:
            raise PdfReadError(f"pdfplumber layout read failed: {exc}") from exc
        runs = [
            TextRun(
                text=word["text"],
                font_name=str(word.get("fontname", "")),
                font_size=float(word.get("size", 0.0)),
                x=float(word["x0"]),
                y=float(word["bottom"]),
                width=float(word["x1"] - word["x0"]),
                height=float(word["bottom"] - word["top"]),
            )
            for word in words
        ]
        return PageLayout(text_runs=runs, annotation_count=annotation_count)
