from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.models import ExtractedText
from invoice_fraud.fields.models import FieldSet
from invoice_fraud.integrity.models import TextComparison
from invoice_fraud.scoring.models import FraudAssessment, Indicator


@dataclass(slots=True)
class PipelineContext:
    document: Document
    extracted: ExtractedText = field(default_factory=ExtractedText.empty)
    fields: FieldSet = field(default_factory=FieldSet)
    confidence: float = 0.0
    fields_with_low_confidence: list[str] = field(default_factory=list)
    integrity_indicators: list[Indicator] = field(default_factory=list)
    text_comparison: TextComparison | None = None
    assessment: FraudAssessment | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
