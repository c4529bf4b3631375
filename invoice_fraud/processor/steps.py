from invoice_fraud.ai_extraction.base import BaseFieldExtractor
from invoice_fraud.ai_extraction.exceptions import AIExtractionUnavailable
from invoice_fraud.extraction.exceptions import ExtractionFailed
from invoice_fraud.extraction.models import ExtractedText, OcrMode, TextSource
from invoice_fraud.extraction.orchestrator import ExtractionOrchestrator
from invoice_fraud.extraction.text_layer import PAGE_SEPARATOR
from invoice_fraud.fields.models import FieldSet
from invoice_fraud.fields.parser import FALLBACK_CONFIDENCE, FieldParser
from invoice_fraud.integrity.comparison import compare_ocr_with_text_layer
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.extractor import OcrExtractor
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.pdf.exceptions import PdfReadError
from invoice_fraud.processor.pipeline import PipelineContext, PipelineStep
from invoice_fraud.scoring.engine import FraudScoringEngine


class ExtractTextStep(PipelineStep):
    def __init__(self, orchestrator: ExtractionOrchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, context: PipelineContext) -> PipelineContext:
        try:
            context.extracted = self._orchestrator.extract_text(context.document)
        except ExtractionFailed as exc:
            Log.warning(f"Text extraction failed, continuing with empty text: {exc}")
            context.extracted = ExtractedText.empty()
        Log.info(
            f"Extracted {len(context.extracted.text)} chars",
            source=context.extracted.source.value,
        )
        return context


class CrossCheckTextLayerStep(PipelineStep):
    """Compares a fast OCR pass with the embedded text layer.

    Only runs for documents whose text came from the text layer. OCR reads at
    most `max_pages` pages, so the text layer is re-read over the same pages
    before comparing. Mismatches are added to the integrity indicators.
    """

    def __init__(
        self, ocr_extractor: OcrExtractor, pdf_reader: BasePdfReader, max_pages: int = 3
    ) -> None:
        self._ocr_extractor = ocr_extractor
        self._pdf_reader = pdf_reader
        self._max_pages = max_pages

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.extracted.source is not TextSource.TEXT_LAYER:
            return context
        try:
            ocr = self._ocr_extractor.recognize(context.document, OcrMode.FAST)
            pages = self._pdf_reader.page_texts(
                context.document.content, max_pages=self._max_pages
            )
        except (ExtractionFailed, PdfReadError) as exc:
            Log.warning(f"Skipping text layer cross-check: {exc}")
            return context
        comparison = compare_ocr_with_text_layer(ocr.text, PAGE_SEPARATOR.join(pages).strip())
        context.text_comparison = comparison
        context.integrity_indicators.extend(comparison.indicators)
        Log.info(
            f"Text layer cross-check similarity {comparison.similarity}%",
            pages=len(pages),
        )
        return context


class ExtractFieldsStep(PipelineStep):
    """Structures extracted text into a FieldSet.

    Uses the AI extractor when one is configured and falls back to the regex
    parser on any AI failure. The AI call is never retried.
    """

    def __init__(
        self,
        field_extractor: BaseFieldExtractor | None,
        field_parser: FieldParser,
        fallback_confidence: float = FALLBACK_CONFIDENCE,
    ) -> None:
        self._field_extractor = field_extractor
        self._field_parser = field_parser
        self._fallback_confidence = fallback_confidence

    def run(self, context: PipelineContext) -> PipelineContext:
        text = context.extracted.text
        if not text.strip():
            Log.warning("No text to extract fields from, leaving form empty")
            context.fields = FieldSet()
            context.confidence = 0.0
            context.fields_with_low_confidence = []
            return context

        if self._field_extractor is not None:
            try:
                result = self._field_extractor.extract(text)
            except AIExtractionUnavailable as exc:
                Log.warning(f"AI extraction unavailable, using regex fallback: {exc}")
            else:
                context.fields = result.fields
                context.confidence = result.confidence
                context.fields_with_low_confidence = list(result.fields_with_low_confidence)
                return context

        context.fields = self._field_parser.parse(text)
        context.confidence = self._fallback_confidence
        context.fields_with_low_confidence = self._field_parser.low_confidence_fields(
            context.fields
        )
        return context


class ScoreStep(PipelineStep):
    def __init__(self, scoring_engine: FraudScoringEngine) -> None:
        self._scoring_engine = scoring_engine

    def run(self, context: PipelineContext) -> PipelineContext:
        context.assessment = self._scoring_engine.score(
            context.fields,
            extraction_confidence=context.confidence,
            integrity_indicators=context.integrity_indicators,
        )
        return context
