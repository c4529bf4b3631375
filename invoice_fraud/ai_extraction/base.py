from abc import ABC, abstractmethod

from invoice_fraud.ai_extraction.models import FieldExtractionResult


class BaseFieldExtractor(ABC):
    """Contract for AI field extraction adapters."""

    @abstractmethod
    def extract(self, text: str) -> FieldExtractionResult:
        """Turn raw invoice text into a structured field set.

        Args:
            text: Text from the text layer or OCR.

        Returns:
            FieldExtractionResult with fields, confidence and low-confidence names.

        Raises:
            AIExtractionUnavailable: on any failure, including malformed output.
        """
