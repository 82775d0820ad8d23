"""
Pytest configuration and fixtures for FitCoach tests.
"""

import os
import pytest
from unittest.mock import AsyncMock, MagicMock

# Set test environment before importing fitcoach modules
os.environ["FITCOACH_ENV"] = "development"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from onboarding.profiles import InMemoryProfileStore
from onboarding.wizard import OnboardingWizard


@pytest.fixture
def mock_saver():
    """Profile saver whose save() succeeds and records its calls."""
    saver = MagicMock()
    saver.save = AsyncMock(return_value=None)
    return saver


@pytest.fixture
def failing_saver():
    """Profile saver whose save() always fails like a network error."""
    saver = MagicMock()
    saver.save = AsyncMock(side_effect=ConnectionError("backend unreachable"))
    return saver


@pytest.fixture
def profile_store():
    """Fresh in-memory profile store."""
    return InMemoryProfileStore()


@pytest.fixture
def wizard(mock_saver):
    """Fresh wizard at step 1 (advisory step rules)."""
    return OnboardingWizard(saver=mock_saver)


@pytest.fixture
def sample_answers():
    """A complete, valid set of answers, as the wizard would hold them at step 7."""
    return {
        "language": "en",
        "gender": "female",
        "age": "30",
        "weight": "64.5",
        "height": "170",
        "country": "Sverige",
        "address": "Storgatan 1, Stockholm",
        "goals": ["lose_weight", "increase_energy"],
        "workout_types": ["gym", "outdoor"],
        "preferences": "both",
        "allergies": "Nuts, lactose",
    }


def walk_through(wizard: OnboardingWizard, answers: dict) -> None:
    """Fill every step from `answers` and advance to the last step."""
    wizard.set_field("language", answers["language"])
    wizard.go_next()
    wizard.set_field("gender", answers["gender"])
    wizard.set_field("age", answers["age"])
    wizard.go_next()
    wizard.set_field("weight", answers["weight"])
    wizard.set_field("height", answers["height"])
    wizard.go_next()
    wizard.set_field("country", answers["country"])
    wizard.set_field("address", answers["address"])
    wizard.go_next()
    for goal in answers["goals"]:
        wizard.toggle_multi_value("goals", goal)
    wizard.go_next()
    for workout in answers["workout_types"]:
        wizard.toggle_multi_value("workout_types", workout)
    wizard.go_next()
    wizard.set_field("preferences", answers["preferences"])
    wizard.set_field("allergies", answers["allergies"])


@pytest.fixture
def ready_wizard(wizard, sample_answers):
    """Wizard on step 7 with every step filled in."""
    walk_through(wizard, sample_answers)
    return wizard


@pytest.fixture
def fill_wizard(sample_answers):
    """Callable that walks any wizard through all seven steps with sample_answers."""
    def fill(wizard: OnboardingWizard) -> OnboardingWizard:
        walk_through(wizard, sample_answers)
        return wizard
    return fill
