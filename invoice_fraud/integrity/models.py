from dataclasses import dataclass, field

from invoice_fraud.pdf.models import DocumentMetadata
from invoice_fraud.scoring.models import Indicator


@dataclass(frozen=True)
class Position:
    x: float
    y: float
    width: float
    height: float


@dataclass
class FontProfile:
    """Occurrences of one (font name, rounded size) pair on a page."""

    font_name: str
    font_size: int
    count: int = 0
    positions: list[Position] = field(default_factory=list)


@dataclass(frozen=True)
class IntegrityAnalysis:
    """Tamper signals derived from a document's structure, not its field values."""

    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    has_text_layer: bool = False
    text_layer_text: str | None = None
    font_profiles: list[FontProfile] = field(default_factory=list)
    indicators: list[Indicator] = field(default_factory=list)


@dataclass(frozen=True)
class TextComparison:
    """Similarity (0-100) between OCR output and the embedded text layer."""

    similarity: int
    indicators: list[Indicator] = field(default_factory=list)
