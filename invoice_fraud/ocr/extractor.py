import io
from types import TracebackType

from PIL import Image, UnidentifiedImageError

from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.exceptions import ExtractionFailed
from invoice_fraud.extraction.models import ExtractedText, OcrMode, TextSource
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.base import BaseOcrEngine, OcrPageResult
from invoice_fraud.ocr.preprocessing import adjust_contrast_brightness
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError

PAGE_SEPARATOR = "\n\n"


class OcrExtractor:
    """Runs OCR over a document in fast or thorough mode.

    PDF pages are rasterized with the PDF reader first; image files are fed to
    the engine directly. The engine handle is owned by this extractor and is
    released by `close()` (or by leaving the ``with`` block).
    """

    def __init__(
        self,
        engine: BaseOcrEngine,
        pdf_reader: BasePdfReader,
        *,
        fast_scale: float = 1.5,
        thorough_scale: float = 2.0,
        contrast_gain: float = 1.2,
        brightness_offset: float = 10.0,
        max_pages: int = 3,
    ) -> None:
        self._engine = engine
        self._pdf_reader = pdf_reader
        self._scales = {OcrMode.FAST: fast_scale, OcrMode.THOROUGH: thorough_scale}
        self._contrast_gain = contrast_gain
        self._brightness_offset = brightness_offset
        self._max_pages = max_pages

    def __enter__(self) -> "OcrExtractor":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def open(self) -> None:
        try:
            self._engine.start()
        except ExtractionFailed as exc:
            Log.warning(f"OCR engine unavailable, only text-layer PDFs can be read: {exc}")

    def close(self) -> None:
        self._engine.stop()

    def recognize(self, document: Document, mode: OcrMode) -> ExtractedText:
        """Recognize all (up to `max_pages`) pages of the document.

        Raises:
            ExtractionFailed: on rendering, decoding, or engine errors.
        """
        images = self._load_images(document, mode)
        results: list[OcrPageResult] = []
        for image in images:
            if mode is OcrMode.THOROUGH:
                image = adjust_contrast_brightness(
                    image, self._contrast_gain, self._brightness_offset
                )
            results.append(self._engine.recognize(image))

        text = PAGE_SEPARATOR.join(r.text for r in results).strip()
        confidence = sum(r.confidence for r in results) / len(results) if results else 0.0
        Log.info(
            f"OCR {mode.value} pass recognized {len(text)} chars",
            pages=len(results),
            confidence=round(confidence, 2),
        )
        return ExtractedText(text=text, confidence=confidence, source=TextSource.OCR)

    def _load_images(self, document: Document, mode: OcrMode) -> list[Image.Image]:
        if not document.is_pdf:
            return [self._decode_image(document.content)]
        scale = self._scales[mode]
        try:
            page_count = min(self._pdf_reader.page_count(document.content), self._max_pages)
            return [
                self._decode_image(
                    self._pdf_reader.render_page(document.content, index, scale)
                )
                for index in range(page_count)
            ]
        except PdfReadError as exc:
            raise ExtractionFailed(f"Could not rasterize PDF for OCR: {exc}") from exc

    @staticmethod
    def _decode_image(data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ExtractionFailed(f"Could not decode image for OCR: {exc}") from exc
        return image
