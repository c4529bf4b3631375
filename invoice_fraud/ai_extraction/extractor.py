"""AI-powered invoice field extractor."""

import json
from pathlib import Path

from invoice_fraud.ai_extraction.base import BaseFieldExtractor
from invoice_fraud.ai_extraction.client_base import BaseExtractionClient
from invoice_fraud.ai_extraction.exceptions import AIExtractionUnavailable
from invoice_fraud.ai_extraction.models import FieldExtractionResult
from invoice_fraud.ai_extraction.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    load_system_prompt,
)
from invoice_fraud.ai_extraction.validator import validate_and_build
from invoice_fraud.logging.logger import Log


class AiFieldExtractor(BaseFieldExtractor):
    """Extracts invoice fields from text through an AI chat completion."""

    def __init__(
        self,
        *,
        client: BaseExtractionClient,
        model: str,
        temperature: float = 0.1,
        max_input_chars: int = 3000,
        prompt_template_path: Path | None = None,
        system_prompt_path: Path | None = None,
        json_schema_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_input_chars = max_input_chars
        self._prompt_template = load_prompt_template(prompt_template_path)
        self._system_prompt = load_system_prompt(system_prompt_path)
        self._json_schema = json.loads(load_json_schema(json_schema_path))

    def extract(self, text: str) -> FieldExtractionResult:
        prompt = self._build_prompt(text)
        Log.debug(f"Extraction prompt:\n{prompt}")

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        result = validate_and_build(self._parse_json(raw_response))
        Log.info(
            f"AI extraction complete: {len(result.fields.present())} fields",
            confidence=result.confidence,
        )
        return result

    def _build_prompt(self, text: str) -> str:
        return self._prompt_template.format(invoice_text=text[: self._max_input_chars])

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AIExtractionUnavailable(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AIExtractionUnavailable("JSON response must be an object")
        return parsed
