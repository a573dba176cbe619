"""Configuration module for the video Q&A pipeline."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()


class VideoQAConfig(BaseModel):
    """Configuration for the video Q&A pipeline.

    Holds the credentials and endpoints for the transcript job service (Apify)
    and the ingestion/generation service (Gemini), plus the polling and timeout
    knobs. All settings can be overridden via environment variables or passed
    explicitly, which is how tests inject a zero-second poll interval.
    """

    # Apify (transcript job service)
    apify_api_key: str = Field(default_factory=lambda: os.getenv("APIFY_API_KEY", ""))
    apify_base_url: str = Field(
        default_factory=lambda: os.getenv("APIFY_BASE_URL", "https://api.apify.com/v2")
    )
    apify_actor_id: str = Field(
        default_factory=lambda: os.getenv("APIFY_ACTOR_ID", "streamers~youtube-scraper")
    )
    max_results: int = Field(
        default_factory=lambda: int(os.getenv("APIFY_MAX_RESULTS", "1"))
    )

    # Polling settings
    poll_interval_seconds: float = Field(
        default_factory=lambda: float(os.getenv("APIFY_POLL_INTERVAL_SECONDS", "5"))
    )
    max_poll_attempts: int = Field(
        default_factory=lambda: int(os.getenv("APIFY_MAX_POLL_ATTEMPTS", "60"))
    )

    # Gemini (ingestion + generation)
    gemini_api_key: str = Field(default_factory=lambda: os.getenv("GEMINI_API_KEY", ""))
    gemini_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"
        )
    )
    gemini_model: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    )
    upload_wait_seconds: float = Field(
        default_factory=lambda: float(os.getenv("GEMINI_UPLOAD_WAIT_SECONDS", "3"))
    )
    # 0 keeps the single optimistic wait; N > 0 polls the file state N times
    upload_state_checks: int = Field(
        default_factory=lambda: int(os.getenv("GEMINI_UPLOAD_STATE_CHECKS", "0"))
    )

    # HTTP settings
    request_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT_SECONDS", "300"))
    )

    def require_credentials(self) -> None:
        """Ensure both API keys are present.

        Raises:
            ConfigurationError: Naming every missing environment variable.
        """
        missing = [
            name
            for name, value in (
                ("APIFY_API_KEY", self.apify_api_key),
                ("GEMINI_API_KEY", self.gemini_api_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} environment variable(s) not set"
            )


def get_config() -> VideoQAConfig:
    """Get configuration instance built from the environment.

    Returns:
        VideoQAConfig: Configuration object with all settings.

    Raises:
        ConfigurationError: If an environment variable holds a malformed value.
    """
    try:
        return VideoQAConfig()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration value: {e}") from e
