from abc import ABC, abstractmethod


class BaseExtractionClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return provider response as plain text.

        Raises:
            AIExtractionNetworkError: on transport or provider API errors.
            AIExtractionUnavailable: when the provider returns no content.
        """
