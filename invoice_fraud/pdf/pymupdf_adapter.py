import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import pymupdf

from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.dates import parse_pdf_date
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.pdf.models import DocumentMetadata, PageLayout, TextRun


_MUPDF_LOCK = threading.Lock()


@contextmanager
def _open(pdf_bytes: bytes) -> Iterator[Any]:
    """Open a document while holding the module lock. MuPDF is not thread-safe."""
    with _MUPDF_LOCK:
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")  # type: ignore[no-untyped-call]
        try:
            if doc.needs_pass:
                raise PdfReadError("PDF is encrypted")
            yield doc
        finally:
            doc.close()


def _spans(page: Any) -> list[dict[str, Any]]:
    spans: list[dict[str, Any]] = []
    for block in page.get_text("dict")["blocks"]:
        for line in block.get("lines", []):
            spans.extend(line.get("spans", []))
    return spans


class PyMuPdfAdapter(BasePdfReader):
    """Reads and renders PDFs using PyMuPDF."""

    def page_texts(self, pdf_bytes: bytes, max_pages: int | None = None) -> list[str]:
        try:
            with _open(pdf_bytes) as doc:
                count = doc.page_count if max_pages is None else min(max_pages, doc.page_count)
                return [
                    " ".join(span["text"] for span in _spans(doc[index]))
                    for index in range(count)
                ]
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf text extraction failed: {exc}") from exc

    def page_count(self, pdf_bytes: bytes) -> int:
        try:
            with _open(pdf_bytes) as doc:
                return int(doc.page_count)
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf page count failed: {exc}") from exc

    def render_page(self, pdf_bytes: bytes, page_index: int, scale: float) -> bytes:
        try:
            with _open(pdf_bytes) as doc:
                pixmap = doc[page_index].get_pixmap(matrix=pymupdf.Matrix(scale, scale))
                return bytes(pixmap.tobytes("png"))
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(
                f"pymupdf rendering of page {page_index + 1} failed: {exc}"
            ) from exc

    def read_metadata(self, pdf_bytes: bytes) -> DocumentMetadata:
        try:
            with _open(pdf_bytes) as doc:
                info = dict(doc.metadata or {})
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf metadata read failed: {exc}") from exc
        return DocumentMetadata(
            creation_date=parse_pdf_date(info.get("creationDate")),
            modification_date=parse_pdf_date(info.get("modDate")),
            creator=info.get("creator") or None,
            producer=info.get("producer") or None,
            title=info.get("title") or None,
            subject=info.get("subject") or None,
            author=info.get("author") or None,
            keywords=info.get("keywords") or None,
        )

    def first_page_layout(self, pdf_bytes: bytes) -> PageLayout:
        try:
            with _open(pdf_bytes) as doc:
                if doc.page_count == 0:
                    return PageLayout()
                page = doc[0]
                spans = _spans(page)
                annotation_count = len(list(page.annots()))
        except PdfReadError:
            raise
        except Exception as exc:
            raise PdfReadError(f"pymupdf layout read failed: {exc}") from exc
        runs = [
            TextRun(
                text=span["text"],
                font_name=str(span.get("font", "")),
                font_size=float(span.get("size", 0.0)),
                x=float(span["origin"][0]),
                y=float(span["origin"][1]),
                width=float(span["bbox"][2] - span["bbox"][0]),
                height=float(span["bbox"][3] - span["bbox"][1]),
            )
            for span in spans
            if span.get("text", "").strip()
        ]
        return PageLayout(text_runs=runs, annotation_count=annotation_count)
