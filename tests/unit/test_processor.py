from collections.abc import Callable
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.models import ExtractedText, TextSource
from invoice_fraud.extraction.orchestrator import ExtractionOrchestrator
from invoice_fraud.fields.parser import FieldParser
from invoice_fraud.integrity.analyzer import DocumentIntegrityAnalyzer
from invoice_fraud.integrity.models import IntegrityAnalysis
from invoice_fraud.processor.pipeline import PipelineContext, PipelineStep
from invoice_fraud.processor.processor import InvoiceProcessor
from invoice_fraud.processor.steps import ExtractFieldsStep, ExtractTextStep
from invoice_fraud.scoring.engine import FraudScoringEngine
from invoice_fraud.scoring.models import Indicator, IndicatorType, RiskLevel

TODAY = datetime(2024, 6, 1, 12, 0)

METADATA_SIGNAL = Indicator(
    IndicatorType.METADATA_TAMPERING, "modification-date", "modified later", 5
)
CROSS_CHECK_SIGNAL = Indicator(
    IndicatorType.TEXT_LAYER_MISMATCH, "numerical-data", "numbers differ", 7
)


class _AddCrossCheckSignal(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.integrity_indicators.append(CROSS_CHECK_SIGNAL)
        return context


def _make_processor(
    invoice_text: str,
    analyzer: MagicMock | None = None,
    extra_steps: list[PipelineStep] | None = None,
) -> InvoiceProcessor:
    orchestrator = MagicMock(spec=ExtractionOrchestrator)
    orchestrator.extract_text.return_value = ExtractedText.from_text_layer(invoice_text)
    steps: list[PipelineStep] = [
        ExtractTextStep(orchestrator),
        *(extra_steps or []),
        ExtractFieldsStep(None, FieldParser()),
    ]
    return InvoiceProcessor(
        steps=steps,
        scoring_engine=FraudScoringEngine(clock=lambda: TODAY),
        integrity_analyzer=analyzer,
    )


def _analyzer(
    indicators: list[Indicator] | None = None, error: Exception | None = None
) -> MagicMock:
    analyzer = MagicMock(spec=DocumentIntegrityAnalyzer)
    if error is not None:
        analyzer.analyze.side_effect = error
    else:
        analyzer.analyze.return_value = IntegrityAnalysis(indicators=indicators or [])
    return analyzer


@pytest.fixture()
def document(pdf_document: Callable[[bytes], Document]) -> Document:
    return pdf_document(b"%PDF")


class TestProcess:
    def test_regex_fallback_review(self, invoice_text: str, document: Document) -> None:
        review = _make_processor(invoice_text).process(document)
        assert review.extraction_source is TextSource.TEXT_LAYER
        assert review.fields.vin == "JTDBR32E720123456"
        assert review.confidence == 60
        assert review.integrity_indicators == []
        assert review.assessment.fraud_score == 90.0
        assert [i.field for i in review.assessment.fraud_indicators] == ["general"]
        assert review.assessment.risk_level is RiskLevel.LOW

    def test_integrity_runs_on_the_same_document(
        self, invoice_text: str, document: Document
    ) -> None:
        analyzer = _analyzer()
        _make_processor(invoice_text, analyzer).process(document)
        analyzer.analyze.assert_called_once_with(document)

    def test_integrity_and_cross_check_signals_are_merged(
        self, invoice_text: str, document: Document
    ) -> None:
        processor = _make_processor(
            invoice_text, _analyzer([METADATA_SIGNAL]), [_AddCrossCheckSignal()]
        )
        review = processor.process(document)
        assert review.integrity_indicators == [METADATA_SIGNAL, CROSS_CHECK_SIGNAL]
        assert review.assessment.fraud_indicators[-2:] == [METADATA_SIGNAL, CROSS_CHECK_SIGNAL]
        assert review.assessment.fraud_score == pytest.approx(90 - 12 * 1.2)

    def test_integrity_crash_does_not_fail_document(
        self, invoice_text: str, document: Document
    ) -> None:
        processor = _make_processor(invoice_text, _analyzer(error=RuntimeError("boom")))
        review = processor.process(document)
        assert review.integrity_indicators == []
        assert review.assessment.fraud_score == 90.0

    def test_empty_text_gives_empty_form(self, document: Document) -> None:
        review = _make_processor("").process(document)
        assert review.fields.present() == {}
        assert review.confidence == 0.0
        assert review.assessment.fraud_score == 84.0
