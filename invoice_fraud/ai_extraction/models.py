from dataclasses import dataclass, field

from invoice_fraud.fields.models import FieldSet


@dataclass(frozen=True)
class FieldExtractionResult:
    """Structured fields with the extractor's overall confidence (0-100)."""

    fields: FieldSet
    confidence: float
    fields_with_low_confidence: list[str] = field(default_factory=list)
