"""Tests for FitCoach settings."""

import pytest

from fitcoach.config import FitCoachSettings, get_settings, settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    s = FitCoachSettings(_env_file=None)
    assert s.default_language == "sv"
    assert s.default_country == "Sverige"
    assert s.post_onboarding_destination == "/dashboard"
    assert s.onboarding_enforce_step_rules is False
    assert s.profile_save_delay_seconds == 0.0
    assert s.onboarding_session_ttl_minutes == 30
    assert s.is_development is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("FITCOACH_ENV", "production")
    monkeypatch.setenv("ONBOARDING_ENFORCE_STEP_RULES", "1")
    monkeypatch.setenv("PROFILE_SAVE_DELAY_SECONDS", "0.5")
    s = get_settings()
    assert s.is_production is True
    assert s.onboarding_enforce_step_rules is True
    assert s.profile_save_delay_seconds == 0.5


def test_invalid_language_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_LANGUAGE", "de")
    with pytest.raises(Exception):
        get_settings()


def test_proxy_reads_settings():
    assert settings.post_onboarding_destination == "/dashboard"
