from invoice_fraud.config.settings import Settings
from invoice_fraud.integrity.analyzer import DocumentIntegrityAnalyzer
from invoice_fraud.pdf.base import BasePdfReader


class IntegrityAnalyzerFactory:
    """Creates the document integrity analyzer, or None when disabled."""

    @classmethod
    def create(
        cls, settings: Settings, pdf_reader: BasePdfReader
    ) -> DocumentIntegrityAnalyzer | None:
        if not settings.integrity_analysis_enabled:
            return None
        return DocumentIntegrityAnalyzer(pdf_reader)
