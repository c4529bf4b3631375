from collections import OrderedDict

import pytesseract
from PIL import Image

from invoice_fraud.extraction.exceptions import ExtractionFailed
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.base import BaseOcrEngine, OcrPageResult

# LSTM engine only, fully automatic page segmentation.
FAST_TESSERACT_CONFIG = "--oem 1 --psm 3"


class TesseractEngine(BaseOcrEngine):
    """OCR engine handle backed by the tesseract binary via pytesseract."""

    def __init__(
        self,
        *,
        language: str = "eng",
        tesseract_cmd: str = "",
        config: str = FAST_TESSERACT_CONFIG,
    ) -> None:
        self._language = language
        self._tesseract_cmd = tesseract_cmd
        self._config = config
        self._version: str | None = None

    @property
    def is_running(self) -> bool:
        return self._version is not None

    def start(self) -> None:
        if self.is_running:
            return
        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
        try:
            self._version = str(pytesseract.get_tesseract_version())
        except (pytesseract.TesseractNotFoundError, OSError) as exc:
            raise ExtractionFailed(f"Tesseract is not available: {exc}") from exc
        Log.info("Tesseract engine started", version=self._version, lang=self._language)

    def stop(self) -> None:
        if self.is_running:
            Log.info("Tesseract engine stopped")
        self._version = None

    def recognize(self, image: Image.Image) -> OcrPageResult:
        self.start()
        try:
            data = pytesseract.image_to_data(
                image,
                lang=self._language,
                config=self._config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, RuntimeError, OSError) as exc:
            raise ExtractionFailed(f"Tesseract recognition failed: {exc}") from exc
        return self._build_result(data)

    @staticmethod
    def _build_result(data: dict[str, list[object]]) -> OcrPageResult:
        lines: OrderedDict[tuple[int, int, int], list[str]] = OrderedDict()
        confidences: list[float] = []
        for index, raw_word in enumerate(data.get("text", [])):
            word = str(raw_word).strip()
            if not word:
                continue
            key = (
                int(str(data["block_num"][index])),
                int(str(data["par_num"][index])),
                int(str(data["line_num"][index])),
            )
            lines.setdefault(key, []).append(word)
            conf = float(str(data["conf"][index]))
            if conf >= 0:
                confidences.append(conf)
        text = "\n".join(" ".join(words) for words in lines.values())
        confidence = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrPageResult(text=text, confidence=round(confidence, 2))
