"""
Onboarding State Management.

Holds the answers accumulated while the user walks through the seven
onboarding steps, plus the per-step rules that decide whether a step is
complete enough to move on.

The answers live in memory for the lifetime of one wizard; they are handed
to the profile-save collaborator in full only at completion.
"""

from dataclasses import dataclass, field, asdict
from enum import IntEnum
from typing import Literal
import json


Language = Literal["sv", "en"]
Gender = Literal["male", "female", "other"]
ContentPreference = Literal["meal_plan", "workout_plan", "both"]
GoalTag = Literal["lose_weight", "build_muscle", "stay_healthy", "increase_energy"]
WorkoutTag = Literal["home_workout", "gym", "outdoor", "swimming", "group_classes"]


class OnboardingStep(IntEnum):
    """Onboarding wizard steps, in order."""
    LANGUAGE = 1       # App language
    PERSONAL = 2       # Gender + age
    BODY = 3           # Weight + height
    LOCATION = 4       # Country + address
    GOALS = 5          # Fitness goals (multi-select)
    WORKOUTS = 6       # Workout types (multi-select)
    PREFERENCES = 7    # Plan preference + allergies


FIRST_STEP = OnboardingStep.LANGUAGE
TOTAL_STEPS = len(OnboardingStep)

DEFAULT_LANGUAGE: Language = "sv"
DEFAULT_COUNTRY = "Sverige"


@dataclass
class OnboardingAnswers:
    """
    Answers collected by the onboarding wizard.

    Filled forward one step at a time. Going back to an earlier step never
    clears anything; revisiting a step simply overwrites its own fields.
    """
    # Step 1
    language: Language = DEFAULT_LANGUAGE

    # Step 2
    gender: Gender | None = None
    age: str = ""

    # Step 3 (kg / cm, kept as the raw numeric strings the user typed)
    weight: str = ""
    height: str = ""

    # Step 4
    country: str = DEFAULT_COUNTRY
    address: str = ""

    # Step 5-6: ordered sets (no duplicates, insertion order kept for display)
    goals: list[str] = field(default_factory=list)
    workout_types: list[str] = field(default_factory=list)

    # Step 7
    preferences: ContentPreference | None = None
    allergies: str = ""

    def copy(self) -> "OnboardingAnswers":
        """Detached copy (multi-select lists are not shared)."""
        return OnboardingAnswers.from_dict(self.to_dict())

    def to_dict(self) -> dict:
        """Serialize answers to a plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "OnboardingAnswers":
        """Deserialize answers from dict, ignoring unknown keys."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        for key in ("goals", "workout_types"):
            if key in known:
                known[key] = list(known[key] or [])
        return cls(**known)

    def to_json(self) -> str:
        """Serialize answers to JSON string."""
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, json_str: str) -> "OnboardingAnswers":
        """Deserialize answers from JSON string."""
        return cls.from_dict(json.loads(json_str))


# =============================================================================
# Step Rules
# =============================================================================

# Fields that must be filled before leaving each step
STEP_REQUIRED_FIELDS: dict[OnboardingStep, tuple[str, ...]] = {
    OnboardingStep.LANGUAGE: ("language",),
    OnboardingStep.PERSONAL: ("gender", "age"),
    OnboardingStep.BODY: ("weight", "height"),
    OnboardingStep.LOCATION: ("country", "address"),
    OnboardingStep.GOALS: ("goals",),
    OnboardingStep.WORKOUTS: ("workout_types",),
    OnboardingStep.PREFERENCES: ("preferences",),
}


def _is_filled(value: object) -> bool:
    # None, "" and [] all count as "not answered yet"
    if value is None:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, list):
        return len(value) > 0
    return True


def missing_fields(answers: OnboardingAnswers, step: int) -> list[str]:
    """
    List the fields that still block a step.

    Returns an empty list when the step can be left. Unknown steps have no
    fields to report.
    """
    try:
        required = STEP_REQUIRED_FIELDS[OnboardingStep(step)]
    except ValueError:
        return []
    return [name for name in required if not _is_filled(getattr(answers, name))]


def can_advance(answers: OnboardingAnswers, step: int) -> bool:
    """
    Check whether the user may move on from a step.

    Pure function of the answers; it gates both "next" and the final
    "complete". Steps outside 1..TOTAL_STEPS never pass.
    """
    if step < FIRST_STEP or step > TOTAL_STEPS:
        return False
    return not missing_fields(answers, step)


def progress_percent(step: int) -> int:
    """Progress shown in the wizard header ("Step 3 of 7 - 43%")."""
    return round(step / TOTAL_STEPS * 100)
