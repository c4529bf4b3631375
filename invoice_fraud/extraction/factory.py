from invoice_fraud.config.settings import Settings
from invoice_fraud.extraction.orchestrator import ExtractionOrchestrator
from invoice_fraud.extraction.text_layer import TextLayerDetector
from invoice_fraud.ocr.extractor import OcrExtractor
from invoice_fraud.pdf.base import BasePdfReader


class TextLayerDetectorFactory:
    """Creates a text layer detector with thresholds from settings."""

    @classmethod
    def create(cls, settings: Settings, pdf_reader: BasePdfReader) -> TextLayerDetector:
        return TextLayerDetector(
            pdf_reader,
            detection_min_chars=settings.text_layer_detection_min_chars,
            detection_pages=settings.text_layer_detection_pages,
            extraction_min_chars=settings.text_layer_extraction_min_chars,
        )


class ExtractionOrchestratorFactory:
    """Creates the text extraction orchestrator."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        text_layer_detector: TextLayerDetector,
        ocr_extractor: OcrExtractor,
    ) -> ExtractionOrchestrator:
        return ExtractionOrchestrator(
            text_layer_detector,
            ocr_extractor,
            quality_floor_chars=settings.ocr_quality_floor_chars,
        )
