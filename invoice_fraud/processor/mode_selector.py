import math

from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.text_layer import TextLayerDetector
from invoice_fraud.logging.logger import Log
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.processor.models import ProcessingMode, ProcessingPlan

BASE_OVERHEAD_MS = 500
TEXT_LAYER_MS_PER_PAGE = 100
OCR_MS_PER_PAGE = 1000
CHARS_PER_PAGE = 1000
FIELD_EXTRACTION_MS_PER_1000_CHARS = 500


class ProcessingModeSelector:
    """Routes short documents to inline processing and long ones to the background."""

    def __init__(
        self,
        pdf_reader: BasePdfReader,
        text_layer_detector: TextLayerDetector,
        *,
        sync_threshold_ms: int = 10000,
        max_pages_sync: int = 3,
    ) -> None:
        self._pdf_reader = pdf_reader
        self._text_layer_detector = text_layer_detector
        self._sync_threshold_ms = sync_threshold_ms
        self._max_pages_sync = max_pages_sync

    @staticmethod
    def estimate_processing_ms(page_count: int, has_text_layer: bool) -> int:
        per_page = TEXT_LAYER_MS_PER_PAGE if has_text_layer else OCR_MS_PER_PAGE
        estimated_chars = page_count * CHARS_PER_PAGE
        return (
            BASE_OVERHEAD_MS
            + page_count * per_page
            + math.ceil(estimated_chars / 1000) * FIELD_EXTRACTION_MS_PER_1000_CHARS
        )

    def select(self, document: Document) -> ProcessingPlan:
        page_count = self._page_count(document)
        has_text_layer = self._text_layer_detector.has_text_layer(document)
        estimated_ms = self.estimate_processing_ms(page_count, has_text_layer)
        is_sync = estimated_ms < self._sync_threshold_ms and page_count <= self._max_pages_sync
        plan = ProcessingPlan(
            mode=ProcessingMode.SYNC if is_sync else ProcessingMode.ASYNC,
            page_count=page_count,
            has_text_layer=has_text_layer,
            estimated_ms=estimated_ms,
            eta_seconds=math.ceil(estimated_ms / 1000),
        )
        Log.info(
            f"Processing plan: {plan.mode.value}",
            pages=page_count,
            text_layer=has_text_layer,
            estimated_ms=estimated_ms,
        )
        return plan

    def _page_count(self, document: Document) -> int:
        if not document.is_pdf:
            return 1
        try:
            return max(self._pdf_reader.page_count(document.content), 1)
        except PdfReadError as exc:
            Log.warning(f"Could not count PDF pages, assuming one: {exc}")
            return 1
