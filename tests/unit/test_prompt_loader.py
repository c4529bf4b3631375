"""Tests for prompt template, system prompt and JSON schema loading."""

import json
from pathlib import Path

import pytest

from invoice_fraud.ai_extraction.exceptions import AIExtractionUnavailable
from invoice_fraud.ai_extraction.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)
from invoice_fraud.fields.models import FieldSet


class TestLoadPromptTemplate:
    def test_loads_default_template(self) -> None:
        template = load_prompt_template()
        assert "{invoice_text}" in template
        assert template.format(invoice_text="INV-1") != template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Hello {invoice_text}")
        assert load_prompt_template(custom) == "Hello {invoice_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AIExtractionUnavailable, match="Failed to load prompt"):
            load_prompt_template(Path("/nonexistent/file.txt"))


class TestLoadSystemPrompt:
    def test_loads_default(self) -> None:
        assert "JSON" in load_system_prompt()

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AIExtractionUnavailable, match="Failed to load system prompt"):
            load_system_prompt(Path("/nonexistent/system.txt"))


class TestLoadJsonSchema:
    def test_default_schema_requires_every_field(self) -> None:
        schema = json.loads(load_json_schema())
        assert schema["required"] == ["data", "confidence", "fieldsWithLowConfidence"]
        assert sorted(schema["properties"]["data"]["required"]) == sorted(
            FieldSet.field_names()
        )

    def test_loads_custom_schema(self, tmp_path: Path) -> None:
        custom = tmp_path / "schema.json"
        custom.write_text('{"type": "object"}')
        assert load_json_schema(custom) == '{"type": "object"}'

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(AIExtractionUnavailable, match="Failed to load JSON schema"):
            load_json_schema(Path("/nonexistent/schema.json"))
