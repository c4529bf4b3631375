"""Validates a parsed AI response against the extraction contract."""

from typing import Any

from invoice_fraud.ai_extraction.exceptions import AIExtractionValidationError
from invoice_fraud.ai_extraction.models import FieldExtractionResult
from invoice_fraud.fields.exceptions import InvalidFieldSetError
from invoice_fraud.fields.models import FieldSet

_MAX_CONFIDENCE = 100


def validate_and_build(data: dict[str, Any]) -> FieldExtractionResult:
    """Validate raw parsed JSON and build a FieldExtractionResult.

    Raises:
        AIExtractionValidationError: on any contract violation, including a
            confidence of zero or less.
    """
    _require_top_level_fields(data)
    fields = _build_fields(data["data"])
    confidence = _build_confidence(data["confidence"])
    low_confidence = _build_low_confidence(data.get("fieldsWithLowConfidence", []))
    return FieldExtractionResult(
        fields=fields,
        confidence=confidence,
        fields_with_low_confidence=low_confidence,
    )


def _require_top_level_fields(data: dict[str, Any]) -> None:
    for field in ("data", "confidence"):
        if field not in data:
            raise AIExtractionValidationError(f"Missing required top-level field: {field}")


def _build_fields(raw: Any) -> FieldSet:
    if not isinstance(raw, dict):
        raise AIExtractionValidationError("'data' must be an object")
    try:
        return FieldSet.from_mapping(raw)
    except InvalidFieldSetError as exc:
        raise AIExtractionValidationError(f"Invalid 'data': {exc}") from exc


def _build_confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AIExtractionValidationError("'confidence' must be a number")
    if raw <= 0:
        raise AIExtractionValidationError(f"'confidence' must be positive, got {raw}")
    if raw > _MAX_CONFIDENCE:
        raise AIExtractionValidationError(
            f"'confidence' must not exceed {_MAX_CONFIDENCE}, got {raw}"
        )
    return float(raw)


def _build_low_confidence(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        raise AIExtractionValidationError("'fieldsWithLowConfidence' must be a list")
    known = set(FieldSet.field_names())
    names: list[str] = []
    for index, item in enumerate(raw):
        if not isinstance(item, str):
            raise AIExtractionValidationError(
                f"'fieldsWithLowConfidence[{index}]' must be a string"
            )
        if item not in known:
            raise AIExtractionValidationError(
                f"'fieldsWithLowConfidence[{index}]' names unknown field {item!r}"
            )
        names.append(item)
    return names
