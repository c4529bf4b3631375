from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from invoice_fraud.ai_extraction.base import BaseFieldExtractor
from invoice_fraud.ai_extraction.exceptions import (
    AIExtractionNetworkError,
    AIExtractionValidationError,
)
from invoice_fraud.ai_extraction.models import FieldExtractionResult
from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.exceptions import ExtractionFailed
from invoice_fraud.extraction.models import ExtractedText, OcrMode, TextSource
from invoice_fraud.extraction.orchestrator import ExtractionOrchestrator
from invoice_fraud.fields.models import FieldSet
from invoice_fraud.fields.parser import FieldParser
from invoice_fraud.ocr.extractor import OcrExtractor
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.processor.pipeline import PipelineContext
from invoice_fraud.processor.steps import (
    CrossCheckTextLayerStep,
    ExtractFieldsStep,
    ExtractTextStep,
    ScoreStep,
)
from invoice_fraud.scoring.engine import FraudScoringEngine
from invoice_fraud.scoring.models import Indicator, IndicatorType


@pytest.fixture()
def context(pdf_document: Callable[[bytes], Document]) -> PipelineContext:
    return PipelineContext(document=pdf_document(b"%PDF"))


def _with_text(context: PipelineContext, text: str, source: TextSource) -> PipelineContext:
    context.extracted = ExtractedText(text=text, confidence=90.0, source=source)
    return context


class TestExtractTextStep:
    def test_stores_extracted_text(self, context: PipelineContext) -> None:
        orchestrator = MagicMock(spec=ExtractionOrchestrator)
        orchestrator.extract_text.return_value = ExtractedText.from_text_layer("Tax invoice")
        result = ExtractTextStep(orchestrator).run(context)
        assert result.extracted.text == "Tax invoice"
        assert result.extracted.source is TextSource.TEXT_LAYER

    def test_failure_leaves_empty_text(self, context: PipelineContext) -> None:
        orchestrator = MagicMock(spec=ExtractionOrchestrator)
        orchestrator.extract_text.side_effect = ExtractionFailed("OCR engine crashed")
        result = ExtractTextStep(orchestrator).run(context)
        assert result.extracted == ExtractedText.empty()


class TestCrossCheckTextLayerStep:
    @staticmethod
    def _reader(pages: list[str]) -> MagicMock:
        reader = MagicMock(spec=BasePdfReader)
        reader.page_texts.return_value = pages
        return reader

    def test_skips_ocr_sourced_text(self, context: PipelineContext) -> None:
        ocr = MagicMock(spec=OcrExtractor)
        reader = self._reader(["abc"])
        CrossCheckTextLayerStep(ocr, reader).run(_with_text(context, "abc", TextSource.OCR))
        ocr.recognize.assert_not_called()
        reader.page_texts.assert_not_called()

    def test_mismatch_adds_indicators(self, context: PipelineContext) -> None:
        ocr = MagicMock(spec=OcrExtractor)
        ocr.recognize.return_value = ExtractedText("xyz", 80.0, TextSource.OCR)
        result = CrossCheckTextLayerStep(ocr, self._reader(["abc"])).run(
            _with_text(context, "abc", TextSource.TEXT_LAYER)
        )
        assert ocr.recognize.call_args.args[1] is OcrMode.FAST
        assert result.text_comparison is not None
        assert result.text_comparison.similarity == 0
        assert [i.type for i in result.integrity_indicators] == [
            IndicatorType.TEXT_LAYER_MISMATCH
        ]

    def test_compares_only_pages_covered_by_ocr(self, context: PipelineContext) -> None:
        ocr = MagicMock(spec=OcrExtractor)
        ocr.recognize.return_value = ExtractedText(
            "Page 1\n\nPage 2\n\nPage 3", 80.0, TextSource.OCR
        )
        reader = self._reader(["Page 1", "Page 2", "Page 3"])
        full_text = "\n\n".join(f"Page {n}" for n in range(1, 6))
        result = CrossCheckTextLayerStep(ocr, reader, max_pages=3).run(
            _with_text(context, full_text, TextSource.TEXT_LAYER)
        )
        reader.page_texts.assert_called_once_with(b"%PDF", max_pages=3)
        assert result.text_comparison is not None
        assert result.text_comparison.similarity == 100
        assert result.integrity_indicators == []

    def test_ocr_failure_is_skipped(self, context: PipelineContext) -> None:
        ocr = MagicMock(spec=OcrExtractor)
        ocr.recognize.side_effect = ExtractionFailed("Tesseract is not available")
        result = CrossCheckTextLayerStep(ocr, self._reader(["abc"])).run(
            _with_text(context, "abc", TextSource.TEXT_LAYER)
        )
        assert result.text_comparison is None
        assert result.integrity_indicators == []

    def test_unreadable_text_layer_is_skipped(self, context: PipelineContext) -> None:
        ocr = MagicMock(spec=OcrExtractor)
        ocr.recognize.return_value = ExtractedText("abc", 80.0, TextSource.OCR)
        reader = self._reader([])
        reader.page_texts.side_effect = PdfReadError("PDF is encrypted")
        result = CrossCheckTextLayerStep(ocr, reader).run(
            _with_text(context, "abc", TextSource.TEXT_LAYER)
        )
        assert result.text_comparison is None
        assert result.integrity_indicators == []


class TestExtractFieldsStep:
    def test_empty_text_gives_empty_form(self, context: PipelineContext) -> None:
        extractor = MagicMock(spec=BaseFieldExtractor)
        result = ExtractFieldsStep(extractor, FieldParser()).run(
            _with_text(context, "   ", TextSource.OCR)
        )
        assert result.fields == FieldSet()
        assert result.confidence == 0.0
        extractor.extract.assert_not_called()

    def test_uses_ai_result(self, context: PipelineContext) -> None:
        extractor = MagicMock(spec=BaseFieldExtractor)
        extractor.extract.return_value = FieldExtractionResult(
            fields=FieldSet(vin="JTDBR32E720123456"),
            confidence=91.0,
            fields_with_low_confidence=["vin"],
        )
        parser = MagicMock(spec=FieldParser)
        result = ExtractFieldsStep(extractor, parser).run(
            _with_text(context, "VIN JTDBR32E720123456", TextSource.OCR)
        )
        assert result.fields.vin == "JTDBR32E720123456"
        assert result.confidence == 91.0
        assert result.fields_with_low_confidence == ["vin"]
        parser.parse.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            AIExtractionNetworkError("AI provider API error: HTTP 500"),
            AIExtractionValidationError("'confidence' must be positive, got 0"),
        ],
    )
    def test_ai_failure_falls_back_to_parser(
        self, context: PipelineContext, invoice_text: str, error: Exception
    ) -> None:
        extractor = MagicMock(spec=BaseFieldExtractor)
        extractor.extract.side_effect = error
        result = ExtractFieldsStep(extractor, FieldParser()).run(
            _with_text(context, invoice_text, TextSource.OCR)
        )
        extractor.extract.assert_called_once()
        assert result.confidence == 60
        assert result.fields.vin == "JTDBR32E720123456"
        assert result.fields_with_low_confidence == []

    def test_without_ai_uses_parser(self, context: PipelineContext) -> None:
        result = ExtractFieldsStep(None, FieldParser(), fallback_confidence=55).run(
            _with_text(context, "Perth WA 6000", TextSource.OCR)
        )
        assert result.confidence == 55
        assert result.fields.postcode == "6000"


class TestScoreStep:
    def test_scores_with_context_confidence_and_integrity(
        self, context: PipelineContext
    ) -> None:
        engine = MagicMock(spec=FraudScoringEngine)
        signal = Indicator(IndicatorType.METADATA_TAMPERING, "general", "x", 4)
        context.fields = FieldSet(vin="ABC")
        context.confidence = 60
        context.integrity_indicators = [signal]
        result = ScoreStep(engine).run(context)
        engine.score.assert_called_once_with(
            FieldSet(vin="ABC"), extraction_confidence=60, integrity_indicators=[signal]
        )
        assert result.assessment is engine.score.return_value
