from concurrent.futures import Future, ThreadPoolExecutor

from invoice_fraud.ai_extraction.factory import FieldExtractorFactory
from invoice_fraud.config.settings import Settings
from invoice_fraud.documents.models import Document
from invoice_fraud.extraction.factory import (
    ExtractionOrchestratorFactory,
    TextLayerDetectorFactory,
)
from invoice_fraud.fields.parser import FieldParser
from invoice_fraud.integrity.analyzer import DocumentIntegrityAnalyzer
from invoice_fraud.integrity.factory import IntegrityAnalyzerFactory
from invoice_fraud.integrity.models import IntegrityAnalysis
from invoice_fraud.logging.logger import Log
from invoice_fraud.ocr.extractor import OcrExtractor
from invoice_fraud.pdf.base import BasePdfReader
from invoice_fraud.processor.exceptions import ProcessorError
from invoice_fraud.processor.models import InvoiceReview
from invoice_fraud.processor.pipeline import PipelineContext, PipelineStep
from invoice_fraud.processor.steps import (
    CrossCheckTextLayerStep,
    ExtractFieldsStep,
    ExtractTextStep,
    ScoreStep,
)
from invoice_fraud.scoring.engine import FraudScoringEngine


class InvoiceProcessor:
    """Runs one invoice through extraction, integrity analysis and scoring.

    Pipeline: extract text -> (cross-check) -> extract fields, while the
    integrity analyzer runs on a worker thread. Both are joined before
    scoring. A crashed integrity task contributes no indicators and never
    fails the document.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        scoring_engine: FraudScoringEngine,
        integrity_analyzer: DocumentIntegrityAnalyzer | None = None,
    ) -> None:
        self._steps = steps
        self._scoring_engine = scoring_engine
        self._integrity_analyzer = integrity_analyzer

    def process(self, document: Document) -> InvoiceReview:
        Log.info(
            f"Processing {document.filename or 'document'}",
            media_type=document.media_type.value,
            size=document.size_bytes,
        )
        context = PipelineContext(document=document)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="integrity") as executor:
            integrity_future = None
            if self._integrity_analyzer is not None:
                integrity_future = executor.submit(self._integrity_analyzer.analyze, document)
            for step in self._steps:
                context = step.run(context)
            analysis = self._join_integrity(integrity_future)

        context.integrity_indicators = [*analysis.indicators, *context.integrity_indicators]
        context = ScoreStep(self._scoring_engine).run(context)
        if context.assessment is None:
            raise ProcessorError("Scoring produced no assessment")

        return InvoiceReview(
            fields=context.fields,
            confidence=context.confidence,
            extraction_source=context.extracted.source,
            fields_with_low_confidence=context.fields_with_low_confidence,
            integrity_indicators=context.integrity_indicators,
            assessment=context.assessment,
            scoring_engine=self._scoring_engine,
        )

    @staticmethod
    def _join_integrity(future: "Future[IntegrityAnalysis] | None") -> IntegrityAnalysis:
        if future is None:
            return IntegrityAnalysis()
        try:
            return future.result()
        except Exception:
            Log.exception("Integrity analysis crashed, continuing without it")
            return IntegrityAnalysis()


def build_processor(
    settings: Settings,
    pdf_reader: BasePdfReader,
    ocr_extractor: OcrExtractor,
) -> InvoiceProcessor:
    """Build an InvoiceProcessor around a caller-owned OCR extractor."""
    detector = TextLayerDetectorFactory.create(settings, pdf_reader)
    orchestrator = ExtractionOrchestratorFactory.create(settings, detector, ocr_extractor)

    steps: list[PipelineStep] = [ExtractTextStep(orchestrator)]
    if settings.cross_check_text_layer:
        steps.append(
            CrossCheckTextLayerStep(
                ocr_extractor, pdf_reader, max_pages=settings.ocr_max_pages
            )
        )
    steps.append(
        ExtractFieldsStep(
            FieldExtractorFactory.create(settings),
            FieldParser(),
            fallback_confidence=settings.fallback_confidence,
        )
    )

    return InvoiceProcessor(
        steps=steps,
        scoring_engine=FraudScoringEngine(
            low_confidence_threshold=settings.low_confidence_threshold
        ),
        integrity_analyzer=IntegrityAnalyzerFactory.create(settings, pdf_reader),
    )
