import io
from collections.abc import Callable

import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from invoice_fraud.documents.models import Document, MediaType

INVOICE_LINES = [
    "Sunshine Motors Pty Ltd",
    "ABN: 12 345 678 901",
    "123 Main Street, Brisbane QLD 4000",
    "Phone: (07) 3555 1234",
    "Email: sales@sunshinemotors.com.au",
    "Vehicle: 2022 Toyota Corolla Ascent Sport",
    "Body Type: Sedan",
    "Transmission: Automatic",
    "Fuel Type: Petrol",
    "Colour: Silver",
    "Engine No: 2ZR1234567",
    "Registration: ABC123",
    "Odometer: 15,000",
    "VIN: JTDBR32E720123456",
    "Tax Invoice No: INV-1042",
    "Date: 15/03/2024",
    "Subtotal: $40,909.09",
    "GST: $4,090.91",
    "Total: $45,000.00",
    "Deposit: $5,000.00",
    "Balance Owing: $40,000.00",
]

REPEATED_PAGE_LINE = "Odometer 15000 km Total 45000"


def _pdf(pages: list[list[str]], title: str | None = None) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    if title is not None:
        c.setTitle(title)
    for lines in pages:
        y = 800
        for line in lines:
            c.drawString(72, y, line)
            y -= 18
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def invoice_text() -> str:
    return "\n".join(INVOICE_LINES)


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Single-page PDF with a short line of known text."""
    return _pdf([["Hello PDF World"]], title="Sale Record")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Two-page PDF with known text on each page."""
    return _pdf([["Page one content"], ["Page two content"]], title="Sale Record")


@pytest.fixture()
def repeated_page_line() -> str:
    return REPEATED_PAGE_LINE


@pytest.fixture()
def five_page_pdf_bytes() -> bytes:
    """Five pages repeating REPEATED_PAGE_LINE."""
    return _pdf([[REPEATED_PAGE_LINE]] * 5, title="Sale Record")


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Valid PDF whose only page is blank."""
    return _pdf([[]], title="Sale Record")


@pytest.fixture()
def invoice_pdf_bytes() -> bytes:
    """Single-page vehicle invoice with an embedded text layer."""
    return _pdf([INVOICE_LINES], title="Vehicle Sale")


@pytest.fixture()
def png_bytes() -> bytes:
    """Small white RGB image encoded as PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (40, 20), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def pdf_document() -> Callable[[bytes], Document]:
    """Factory wrapping raw bytes into a PDF Document."""

    def _make(content: bytes, filename: str = "invoice.pdf") -> Document:
        return Document(
            content=content,
            media_type=MediaType.PDF,
            mime_type="application/pdf",
            filename=filename,
        )

    return _make


@pytest.fixture()
def image_document() -> Callable[[bytes], Document]:
    """Factory wrapping raw bytes into a PNG image Document."""

    def _make(content: bytes, filename: str = "invoice.png") -> Document:
        return Document(
            content=content,
            media_type=MediaType.IMAGE,
            mime_type="image/png",
            filename=filename,
        )

    return _make
