"""Tests for AiFieldExtractor (AI-powered field extraction)."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from invoice_fraud.ai_extraction.exceptions import (
    AIExtractionNetworkError,
    AIExtractionUnavailable,
    AIExtractionValidationError,
)
from invoice_fraud.ai_extraction.extractor import AiFieldExtractor


def _make_extractor(
    client: MagicMock | None = None, **kwargs: object
) -> AiFieldExtractor:
    if client is None:
        client = MagicMock()
    return AiFieldExtractor(client=client, model="test-model", **kwargs)  # type: ignore[arg-type]


def _valid_json_response(confidence: int = 92) -> str:
    return json.dumps({
        "data": {"totalCost": "45000.00", "vehicleMake": "Toyota", "vin": None},
        "confidence": confidence,
        "fieldsWithLowConfidence": ["vehicleMake"],
    })


class TestExtractSuccess:
    def test_returns_extraction_result(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        result = _make_extractor(client).extract("some text")
        assert result.fields.total_cost == "45000.00"
        assert result.fields.vehicle_make == "Toyota"
        assert result.fields.vin == ""
        assert result.confidence == 92.0
        assert result.fields_with_low_confidence == ["vehicleMake"]

    def test_passes_input_text_to_prompt(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client).extract("Sunshine Motors tax invoice")
        user_msg = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "Sunshine Motors tax invoice" in user_msg

    def test_truncates_long_input(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client, max_input_chars=10).extract("A" * 10 + "B" * 50)
        user_msg = client.create_chat_completion.call_args.kwargs["user_prompt"]
        assert "A" * 10 in user_msg
        assert "B" not in user_msg

    def test_calls_ai_with_model_and_schema(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client).extract("text")
        kwargs = client.create_chat_completion.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["json_schema"]["type"] == "object"
        assert kwargs["system_prompt"]

    @pytest.mark.parametrize(("requested", "expected"), [(0.1, 0.1), (0.9, 0.2), (-1.0, 0.0)])
    def test_temperature_is_clamped(self, requested: float, expected: float) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client, temperature=requested).extract("text")
        assert client.create_chat_completion.call_args.kwargs["temperature"] == expected

    def test_strips_code_fences(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = (
            "```json\n" + _valid_json_response() + "\n```"
        )
        assert _make_extractor(client).extract("text").confidence == 92.0

    def test_custom_prompt_template(self, tmp_path: Path) -> None:
        template = tmp_path / "prompt.txt"
        template.write_text("INVOICE>>{invoice_text}<<")
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response()
        _make_extractor(client, prompt_template_path=template).extract("abc")
        assert client.create_chat_completion.call_args.kwargs["user_prompt"] == "INVOICE>>abc<<"


class TestExtractFailures:
    def test_invalid_json(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = "not json at all"
        with pytest.raises(AIExtractionUnavailable, match="Invalid JSON"):
            _make_extractor(client).extract("text")

    def test_json_array_rejected(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = "[1, 2]"
        with pytest.raises(AIExtractionUnavailable, match="must be an object"):
            _make_extractor(client).extract("text")

    def test_zero_confidence_rejected(self) -> None:
        client = MagicMock()
        client.create_chat_completion.return_value = _valid_json_response(confidence=0)
        with pytest.raises(AIExtractionValidationError):
            _make_extractor(client).extract("text")

    def test_network_error_propagates(self) -> None:
        client = MagicMock()
        client.create_chat_completion.side_effect = AIExtractionNetworkError(
            "AI provider API error: HTTP 500"
        )
        with pytest.raises(AIExtractionNetworkError):
            _make_extractor(client).extract("text")

    def test_missing_prompt_file(self) -> None:
        with pytest.raises(AIExtractionUnavailable, match="Failed to load prompt"):
            _make_extractor(prompt_template_path=Path("/nonexistent/prompt.txt"))
