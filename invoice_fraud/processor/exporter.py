import json

from invoice_fraud.processor.models import InvoiceReview


class InvoiceExporter:
    """Converts a reviewed invoice into a flat JSON-serializable document."""

    def export(self, review: InvoiceReview) -> dict[str, object]:
        """Every field key plus confidence, provenance and the fraud assessment."""
        payload: dict[str, object] = dict(review.fields.to_dict())
        payload["confidence"] = review.confidence
        payload["extractionSource"] = review.extraction_source.value
        payload["fieldsWithLowConfidence"] = list(review.fields_with_low_confidence)
        payload.update(review.assessment.to_dict())
        return payload

    def to_json(self, review: InvoiceReview, indent: int | None = 2) -> str:
        return json.dumps(self.export(review), indent=indent)
