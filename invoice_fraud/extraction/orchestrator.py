from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.exceptions import ExtractionFailed
from invoice_fraud.extraction.models import ExtractedText, OcrMode
from invoice_fraud.extraction.text_layer import TextLayerDetector
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.extractor import OcrExtractor


class ExtractionOrchestrator:
    """Chooses between the embedded text layer and OCR for a document.

    Order of attempts:
    1. PDF text layer, accepted as authoritative when long enough.
    2. OCR in fast mode.
    3. OCR in thorough mode when the fast pass yields fewer than
       `quality_floor_chars` characters (or fails); its result replaces the
       fast one entirely.
    """

    def __init__(
        self,
        text_layer_detector: TextLayerDetector,
        ocr_extractor: OcrExtractor,
        *,
        quality_floor_chars: int = 100,
    ) -> None:
        self._text_layer_detector = text_layer_detector
        self._ocr_extractor = ocr_extractor
        self._quality_floor_chars = quality_floor_chars

    def extract_text(self, document: Document) -> ExtractedText:
        """Extract text, escalating through the quality tiers.

        Raises:
            ExtractionFailed: if the thorough OCR pass fails as well.
        """
        if document.is_pdf:
            text = self._text_layer_detector.extract_text(document)
            if text is not None:
                Log.info(f"Using embedded text layer ({len(text)} chars)")
                return ExtractedText.from_text_layer(text)

        try:
            fast = self._ocr_extractor.recognize(document, OcrMode.FAST)
        except ExtractionFailed as exc:
            Log.warning(f"Fast OCR pass failed, retrying thorough: {exc}")
            return self._ocr_extractor.recognize(document, OcrMode.THOROUGH)

        if len(fast.text.strip()) >= self._quality_floor_chars:
            return fast

        Log.info(
            "Fast OCR below quality floor, retrying thorough",
            chars=len(fast.text.strip()),
            floor=self._quality_floor_chars,
        )
        return self._ocr_extractor.recognize(document, OcrMode.THOROUGH)
