class AIExtractionUnavailable(Exception):
    """Raised when AI field extraction fails; callers fall back to regex parsing."""


class AIExtractionValidationError(AIExtractionUnavailable):
    """Raised when the AI response does not match the extraction contract."""


class AIExtractionNetworkError(AIExtractionUnavailable):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
