"""Application configuration loaded from environment variables.

The OpenAI credential is optional at startup: a missing key is reported
per request by the analysis stage, never as a boot failure.

Pipeline thresholds are plain constants here and are handed to each
component explicitly; nothing below reads this module at call time.
"""

from __future__ import annotations

import os


class Settings:
    # Remote reasoning service (OpenAI-compatible chat completions)
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    ANALYSIS_LANGUAGE: str = os.getenv("ANALYSIS_LANGUAGE", "English")

    # Runtime
    APP_ENV: str = os.getenv("APP_ENV", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Job posting fetch + reduction
    FETCH_TIMEOUT_S: float = 15.0
    FETCH_MAX_REDIRECTS: int = 5
    JOB_TEXT_MAX_CHARS: int = 8000
    JOB_TEXT_MIN_CHARS: int = 100

    # Analysis request
    PROMPT_SECTION_MAX_CHARS: int = 6000
    CV_MIN_CHARS: int = 50
    JOB_MIN_CHARS: int = 50
    ANALYSIS_TIMEOUT_S: float = 30.0
    ANALYSIS_MAX_TOKENS: int = 1500
    ANALYSIS_TEMPERATURE: float = 0.7
    ANALYSIS_ANSWER_MAX_CHARS: int = 1500

    # Request limits
    MAX_UPLOAD_SIZE_MB: int = 10

    @property
    def diagnostics_enabled(self) -> bool:
        return self.APP_ENV.lower() == "development"


settings = Settings()
