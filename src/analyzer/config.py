"""Configuration module for the video analysis pipeline."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Check if we're in production
is_production = os.getenv("ENVIRONMENT") == "production"

if not is_production:
    # Development: prioritize .env file
    project_root = Path(__file__).resolve().parent.parent.parent
    dotenv_path = project_root / ".env"
    load_dotenv(dotenv_path, override=True)
else:
    # Production: use cloud platform env vars only
    load_dotenv()

# Fixed model settings, not user-configurable
MODEL_NAME = "claude-sonnet-4-20250514"
MAX_OUTPUT_TOKENS = 1024

MAX_TRANSCRIPT_CHARS = 100_000
TRUNCATION_MARKER = "... [transcript truncated]"
DEFAULT_QUESTION = "What is this video about?"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class AnalyzerConfig(BaseModel):
    """Configuration for the video analysis service.

    Built once at process start and passed by reference into the pipeline
    and the inference client. All settings can be overridden via environment
    variables.
    """

    # Inference API settings
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", "")
    )

    # Server settings
    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))

    # Outbound call timeouts (seconds)
    http_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    )
    inference_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("INFERENCE_TIMEOUT_SECONDS", "60"))
    )

    # Watch page request settings
    user_agent: str = Field(
        default_factory=lambda: os.getenv("YOUTUBE_USER_AGENT", DEFAULT_USER_AGENT)
    )
    accept_language: str = Field(
        default_factory=lambda: os.getenv("YOUTUBE_ACCEPT_LANGUAGE", "en-US,en;q=0.9")
    )

    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


def get_config() -> AnalyzerConfig:
    """Get validated configuration instance.

    Returns:
        AnalyzerConfig: Validated configuration object with all settings.

    Raises:
        ValidationError: If environment variables hold invalid values.
    """
    return AnalyzerConfig()
