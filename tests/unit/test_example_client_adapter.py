"""Tests for ExampleClientAdapter (offline reference adapter)."""

import json

from invoice_fraud.ai_extraction.example_client_adapter import ExampleClientAdapter
from invoice_fraud.ai_extraction.validator import validate_and_build
from invoice_fraud.fields.models import FieldSet


def _complete(**overrides: object) -> str:
    kwargs: dict[str, object] = {
        "model": "any",
        "temperature": 0.0,
        "system_prompt": "sys",
        "user_prompt": "user",
        "json_schema": {"type": "object"},
    }
    kwargs.update(overrides)
    return ExampleClientAdapter().create_chat_completion(**kwargs)  # type: ignore[arg-type]


class TestExampleClientAdapter:
    def test_returns_every_field_as_null(self) -> None:
        data = json.loads(_complete())
        assert list(data["data"]) == FieldSet.field_names()
        assert all(value is None for value in data["data"].values())
        assert data["confidence"] == 50
        assert data["fieldsWithLowConfidence"] == []

    def test_response_passes_validation(self) -> None:
        result = validate_and_build(json.loads(_complete()))
        assert result.fields == FieldSet()
        assert result.confidence == 50.0

    def test_ignores_input_parameters(self) -> None:
        assert _complete() == _complete(model="b", temperature=1.0, user_prompt="u2")
