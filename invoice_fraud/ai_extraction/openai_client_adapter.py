import httpx
import openai

from invoice_fraud.ai_extraction.client_base import BaseExtractionClient
from invoice_fraud.ai_extraction.exceptions import (
    AIExtractionNetworkError,
    AIExtractionUnavailable,
    AIExtractionValidationError,
)

SCHEMA_NAME = "invoice_extraction"


def _strict_schema_format(json_schema: dict[str, object]) -> dict[str, object]:
    return {
        "type": "json_schema",
        "json_schema": {"name": SCHEMA_NAME, "strict": True, "schema": json_schema},
    }


class OpenAIClientAdapter(BaseExtractionClient):
    """Invoice extraction client for OpenAI-compatible chat completion APIs.

    The SDK's own retries are disabled: a failed call falls straight back to
    the regex parser.
    """

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                response_format=_strict_schema_format(json_schema),
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise AIExtractionNetworkError(
                f"AI provider timed out after {self._timeout_seconds}s"
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise AIExtractionNetworkError(f"AI provider unreachable: {exc}") from exc
        except openai.APIStatusError as exc:
            raise AIExtractionNetworkError(
                f"AI provider returned HTTP {exc.status_code}"
            ) from exc
        except openai.APIError as exc:
            raise AIExtractionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AIExtractionUnavailable("AI returned no choices")
        choice = response.choices[0]
        if choice.message.refusal:
            raise AIExtractionUnavailable(f"AI refused the invoice: {choice.message.refusal}")
        if choice.finish_reason == "length":
            raise AIExtractionValidationError("AI response was truncated before the JSON ended")
        if choice.message.content is None:
            raise AIExtractionUnavailable("AI returned empty response")
        return choice.message.content
