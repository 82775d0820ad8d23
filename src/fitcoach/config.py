"""
FitCoach - Configuration and settings.

Settings are read from the environment (or a .env file). Nothing here is
secret yet; profiles are kept in memory until a backend is wired in.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class FitCoachSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    fitcoach_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Onboarding defaults
    default_language: Literal["sv", "en"] = "sv"
    default_country: str = "Sverige"

    # Where the user lands after onboarding
    post_onboarding_destination: str = "/dashboard"

    # False: step rules only drive the UI (disabled buttons)
    # True: the wizard itself refuses to advance/complete an incomplete step
    onboarding_enforce_step_rules: bool = False

    # Simulated latency of the in-memory profile store
    profile_save_delay_seconds: float = 0.0

    # Untouched API onboarding sessions are dropped after this
    onboarding_session_ttl_minutes: int = 30

    @property
    def is_development(self) -> bool:
        return self.fitcoach_env == "development"

    @property
    def is_production(self) -> bool:
        return self.fitcoach_env == "production"


@lru_cache
def get_settings() -> FitCoachSettings:
    """Get cached settings instance."""
    return FitCoachSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: FitCoachSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
