from pathlib import Path

from invoice_fraud.ai_extraction.exceptions import AIExtractionUnavailable

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the extraction prompt template.

    Defaults to the bundled extraction_prompt.txt. The template receives the
    `{invoice_text}` placeholder.

    Raises:
        AIExtractionUnavailable: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AIExtractionUnavailable(f"Failed to load prompt template: {exc}") from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system prompt (defaults to the bundled extraction_system.txt)."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_system.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AIExtractionUnavailable(f"Failed to load system prompt: {exc}") from exc


def load_json_schema(path: Path | None = None) -> str:
    """Load the response JSON schema (defaults to the bundled extraction_schema.json)."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "extraction_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AIExtractionUnavailable(f"Failed to load JSON schema: {exc}") from exc
