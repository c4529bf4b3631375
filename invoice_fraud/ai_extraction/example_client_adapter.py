"""Offline extraction client adapter.

Returns a fixed, contract-valid response without any network call. Useful for
local development and demos, and as a template for new provider adapters:
implement BaseExtractionClient and register the provider in
FieldExtractorFactory.
"""

import json
from typing import ClassVar

from invoice_fraud.ai_extraction.client_base import BaseExtractionClient
from invoice_fraud.fields.models import FieldSet


class ExampleClientAdapter(BaseExtractionClient):
    """Adapter that always answers with an empty field set at confidence 50."""

    DEFAULT_CONFIDENCE: ClassVar[int] = 50

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        return json.dumps(
            {
                "data": {name: None for name in FieldSet.field_names()},
                "confidence": self.DEFAULT_CONFIDENCE,
                "fieldsWithLowConfidence": [],
            }
        )
