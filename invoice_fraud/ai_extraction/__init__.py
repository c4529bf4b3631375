from invoice_fraud.ai_extraction.base import BaseFieldExtractor
from invoice_fraud.ai_extraction.extractor import AiFieldExtractor
from invoice_fraud.ai_extraction.factory import FieldExtractorFactory

__all__ = ["AiFieldExtractor", "BaseFieldExtractor", "FieldExtractorFactory"]
