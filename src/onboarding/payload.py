"""
Onboarding Payload Definition.

The FitnessProfile is the contract between onboarding and the rest of the app.
The wizard collects raw strings while the user types; this module turns a
finished set of answers into typed profile data (numbers, tag lists, parsed
allergies) that the profile store keeps.
"""

import logging
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ProfileSaveError
from .state import TOTAL_STEPS, OnboardingAnswers

logger = logging.getLogger(__name__)


class FitnessProfile(BaseModel):
    """
    Profile created at the end of onboarding.

    WHAT THE APP USES:
    - language → UI language
    - fitness_goals / workout_types → plan generation inputs
    - content_preferences → which plans to build (meal, workout or both)
    - allergies → excluded from meal plans

    Body measurements are metric: weight in kg, height in cm.
    """

    language: Literal["sv", "en"]
    gender: Literal["male", "female", "other"]
    age: int = Field(ge=13, le=120)
    weight: float = Field(gt=20, le=400, description="Body weight in kg")
    height: float = Field(ge=90, le=250, description="Height in cm")

    country: str = Field(min_length=1)
    address: str = Field(min_length=1)

    fitness_goals: list[str] = Field(min_length=1)
    workout_types: list[str] = Field(min_length=1)
    content_preferences: list[Literal["meal_plan", "workout_plan"]] = Field(min_length=1)

    allergies: list[str] = Field(default_factory=list)

    onboarding_completed: bool = True
    onboarding_step: int = TOTAL_STEPS
    completed_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @field_validator("age", "weight", "height", mode="before")
    @classmethod
    def parse_decimal_comma(cls, v):
        """Accept "72,5" as well as "72.5"."""
        if isinstance(v, str):
            v = v.strip().replace(",", ".")
            if v.endswith(".0"):
                v = v[:-2]
        return v

    @field_validator("allergies", mode="before")
    @classmethod
    def normalize_allergies(cls, v):
        """Free-text allergies ("Nötter, laktos") → ["nötter", "laktos"]."""
        if not v:
            return []
        if isinstance(v, str):
            v = v.replace(";", ",").replace("\n", ",").split(",")
        return [a.lower().strip() for a in v if a and a.strip()]


def expand_content_preference(preference: str | None) -> list[str]:
    """'both' means a meal plan AND a workout plan."""
    if preference == "both":
        return ["meal_plan", "workout_plan"]
    if preference:
        return [preference]
    return []


def build_profile_from_answers(answers: OnboardingAnswers) -> FitnessProfile:
    """
    Build the final profile from completed wizard answers.

    Raises:
        ProfileSaveError: answers do not form a valid profile (e.g. age out of range)
    """
    try:
        return FitnessProfile(
            language=answers.language,
            gender=answers.gender,
            age=answers.age,
            weight=answers.weight,
            height=answers.height,
            country=answers.country.strip(),
            address=answers.address.strip(),
            fitness_goals=list(answers.goals),
            workout_types=list(answers.workout_types),
            content_preferences=expand_content_preference(answers.preferences),
            allergies=answers.allergies,
        )
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        logger.warning(f"Answers rejected by profile validation: {fields}")
        raise ProfileSaveError(
            f"Could not build profile (check: {', '.join(fields)})",
            details=[{"field": name} for name in fields],
        )


def get_profile_summary(profile: FitnessProfile) -> str:
    """
    Get a human-readable summary of a profile.

    For display in the CLI or logging.
    """
    parts = [
        f"{profile.age} y/o {profile.gender}",
        f"{profile.weight:g} kg, {profile.height:g} cm",
        f"{len(profile.fitness_goals)} goal{'s' if len(profile.fitness_goals) != 1 else ''}",
        f"{len(profile.workout_types)} workout type{'s' if len(profile.workout_types) != 1 else ''}",
        " + ".join(p.replace("_", " ") for p in profile.content_preferences),
    ]
    if profile.allergies:
        parts.append(f"allergies: {', '.join(profile.allergies)}")
    return ", ".join(parts)
