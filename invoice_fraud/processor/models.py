from dataclasses import dataclass, field
from enum import Enum

from invoice_fraud.extraction.models import TextSource
from invoice_fraud.fields.models import FieldSet
from invoice_fraud.scoring.engine import FraudScoringEngine
from invoice_fraud.scoring.models import FraudAssessment, Indicator


class ProcessingMode(str, Enum):
    SYNC = "sync"
    ASYNC = "async"


@dataclass(frozen=True)
class ProcessingPlan:
    """Decision on whether a document is processed inline or in the background."""

    mode: ProcessingMode
    page_count: int
    has_text_layer: bool
    estimated_ms: int
    eta_seconds: int


@dataclass
class InvoiceReview:
    """Editable result of processing one invoice.

    The field set is human-editable; the assessment is always derived from it.
    Integrity indicators belong to the original file and survive every edit.
    """

    fields: FieldSet
    confidence: float
    extraction_source: TextSource
    fields_with_low_confidence: list[str]
    integrity_indicators: list[Indicator]
    assessment: FraudAssessment
    scoring_engine: FraudScoringEngine = field(repr=False)

    def apply_edits(self, **changes: str | None) -> FraudAssessment:
        """Replace fields by camelCase name and re-score.

        Raises:
            InvalidFieldSetError: on unknown field names or non-string values.
        """
        self.fields = self.fields.with_updates(**changes)
        self.assessment = self.scoring_engine.score(
            self.fields,
            extraction_confidence=self.confidence,
            integrity_indicators=self.integrity_indicators,
        )
        return self.assessment

    def field_risk_level(self, field_name: str) -> str:
        return self.scoring_engine.field_risk_level(
            field_name, self.assessment.fraud_indicators
        ).value
