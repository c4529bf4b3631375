"""Consistency check between OCR output and a PDF's embedded text layer."""

import math
import re

from invoice_fraud.integrity.models import TextComparison
from invoice_fraud.scoring.models import Indicator, IndicatorType

SIMILARITY_THRESHOLD = 70
SEVERE_SIMILARITY_THRESHOLD = 50

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"\d+")


def normalize_text(text: str) -> str:
    """Lowercase, turn punctuation into spaces, collapse whitespace."""
    text = _NON_WORD_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance; insertion, deletion and substitution cost 1."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def text_similarity(a: str, b: str) -> int:
    """Percentage similarity of two already-normalized strings (100 = identical)."""
    longer, shorter = (a, b) if len(a) >= len(b) else (b, a)
    if not longer:
        return 100
    ratio = 1 - levenshtein_distance(longer, shorter) / len(longer)
    return int(math.floor(100 * ratio + 0.5))


def compare_ocr_with_text_layer(ocr_text: str, text_layer_text: str | None) -> TextComparison:
    """Flag documents whose rendered text disagrees with their embedded text.

    Without a text layer there is nothing to compare: similarity is 100 and
    no indicators are produced.
    """
    if not text_layer_text:
        return TextComparison(similarity=100)

    normalized_ocr = normalize_text(ocr_text)
    normalized_layer = normalize_text(text_layer_text)
    similarity = text_similarity(normalized_ocr, normalized_layer)

    indicators: list[Indicator] = []
    if similarity < SIMILARITY_THRESHOLD:
        indicators.append(
            Indicator(
                type=IndicatorType.TEXT_LAYER_MISMATCH,
                field="text-consistency",
                message=(
                    f"OCR text differs significantly from embedded text "
                    f"({similarity}% similarity)"
                ),
                severity=8 if similarity < SEVERE_SIMILARITY_THRESHOLD else 6,
            )
        )

    if len(_NUMBER_RE.findall(normalized_ocr)) != len(_NUMBER_RE.findall(normalized_layer)):
        indicators.append(
            Indicator(
                type=IndicatorType.TEXT_LAYER_MISMATCH,
                field="numerical-data",
                message="Different number of numerical values between OCR and text layer",
                severity=7,
            )
        )

    return TextComparison(similarity=similarity, indicators=indicators)
