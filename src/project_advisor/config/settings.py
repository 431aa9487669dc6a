"""
Project Advisor configuration: single source of truth.

Pydantic BaseSettings, load at startup, fail fast on invalid.
"""

import os
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from project root so advisory creds load regardless of cwd
_CONFIG_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(_CONFIG_DIR)))
_DOTENV_PATH = os.path.join(_PROJECT_ROOT, ".env")


class AppSettings(BaseSettings):
    """Central config; single initialization. Advisory creds are driven only from .env / env vars."""

    model_config = SettingsConfigDict(
        env_file=_DOTENV_PATH,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Advisory service (OpenAI-compatible chat completions). No key = local fallback rules only.
    advisory_api_key: Optional[str] = Field(
        default=None,
        description="Bearer credential; set in .env as ADVISORY_API_KEY or OPENAI_API_KEY",
        validation_alias=AliasChoices("ADVISORY_API_KEY", "OPENAI_API_KEY"),
    )
    advisory_model: str = Field(
        default="gpt-4",
        description="Model identifier; set in .env as ADVISORY_MODEL",
        validation_alias="ADVISORY_MODEL",
    )
    advisory_base_url: Optional[str] = Field(
        default=None,
        description="Optional base URL for a compatible endpoint; set in .env as ADVISORY_BASE_URL",
        validation_alias="ADVISORY_BASE_URL",
    )
    advisory_max_tokens: int = Field(default=2000, gt=0, description="Max output tokens per completion")
    advisory_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    advisory_timeout_seconds: float = Field(default=30.0, gt=0, description="Expiry is treated as advisory unavailable")

    # Metrics
    hourly_rate: float = Field(default=50.0, ge=0, description="Currency units per hour used for budget utilization")

    cors_allow_all: bool = Field(default=True)
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173"
    )

    log_level: str = Field(default="INFO", description="Level for the project_advisor logger")

    @property
    def advisory_configured(self) -> bool:
        """True when a credential for the advisory service is present."""
        return bool(self.advisory_api_key)

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Return settings singleton. Fail fast on first load if invalid."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
