from dataclasses import dataclass
from enum import Enum

TEXT_LAYER_CONFIDENCE = 100.0


class TextSource(str, Enum):
    TEXT_LAYER = "text-layer"
    OCR = "ocr"
    NONE = "none"


class OcrMode(str, Enum):
    FAST = "fast"
    THOROUGH = "thorough"


@dataclass(frozen=True)
class ExtractedText:
    """Text produced by one extraction attempt.

    `confidence` (0-100) is only engine-reported for OCR; text-layer results
    carry TEXT_LAYER_CONFIDENCE.
    """

    text: str
    confidence: float
    source: TextSource

    @classmethod
    def from_text_layer(cls, text: str) -> "ExtractedText":
        return cls(text=text, confidence=TEXT_LAYER_CONFIDENCE, source=TextSource.TEXT_LAYER)

    @classmethod
    def empty(cls) -> "ExtractedText":
        """Result used when every extraction tier failed."""
        return cls(text="", confidence=0.0, source=TextSource.NONE)
