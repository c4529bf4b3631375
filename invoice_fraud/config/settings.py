from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pdfplumber"

    text_layer_detection_min_chars: int = 10
    text_layer_detection_pages: int = 3
    text_layer_extraction_min_chars: int = 20

    ocr_language: str = "eng"
    tesseract_cmd: str = ""
    ocr_fast_scale: float = 1.5
    ocr_thorough_scale: float = 2.0
    ocr_contrast_gain: float = 1.2
    ocr_brightness_offset: float = 10.0
    ocr_max_pages: int = 3
    ocr_quality_floor_chars: int = 100
    low_confidence_threshold: int = 70

    ai_provider: str = "none"
    ai_api_key: str = ""
    ai_model_name: str = "gpt-4o-mini"
    ai_base_url: str = ""
    ai_timeout_seconds: int = 30
    ai_temperature: float = 0.1
    ai_max_input_chars: int = 3000

    fallback_confidence: int = 60
    cross_check_text_layer: bool = False
    integrity_analysis_enabled: bool = True

    sync_threshold_ms: int = 10000
    max_pages_sync: int = 3
