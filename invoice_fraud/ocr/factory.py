from invoice_fraud.config.settings import Settings
from invoice_fraud.ocr.extractor import OcrExtractor
from invoice_fraud.ocr.tesseract_adapter import TesseractEngine
from invoice_fraud.pdf.base import BasePdfReader


class OcrExtractorFactory:
    """Creates an OCR extractor wired to a Tesseract engine handle."""

    @classmethod
    def create(cls, settings: Settings, pdf_reader: BasePdfReader) -> OcrExtractor:
        engine = TesseractEngine(
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
        )
        return OcrExtractor(
            engine,
            pdf_reader,
            fast_scale=settings.ocr_fast_scale,
            thorough_scale=settings.ocr_thorough_scale,
            contrast_gain=settings.ocr_contrast_gain,
            brightness_offset=settings.ocr_brightness_offset,
            max_pages=settings.ocr_max_pages,
        )
