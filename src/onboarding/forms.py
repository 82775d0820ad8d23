"""
Onboarding Forms - option catalogs and typed field updates.

Every change to the wizard's answers arrives as a small update message:
one variant per field, each carrying a correctly-typed value. Pydantic's
discriminated unions do the field/value agreement check, so a wizard never
ends up holding e.g. a goal tag in the gender field.

Step rules (is the step complete?) are NOT checked here - see state.can_advance.
"""

import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, TypeAdapter, ValidationError

from .errors import InvalidFieldUpdate
from .state import (
    ContentPreference,
    Gender,
    GoalTag,
    Language,
    OnboardingStep,
    WorkoutTag,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Option Catalogs
# =============================================================================
# Labels are keyed by UI language. The first step picks the language, every
# later step renders in it.

LANGUAGE_OPTIONS = [
    {
        "id": "sv",
        "icon": "🇸🇪",
        "label": {"sv": "Svenska", "en": "Svenska"},
        "description": {"sv": "Använd svenska i appen", "en": "Använd svenska i appen"},
    },
    {
        "id": "en",
        "icon": "🇬🇧",
        "label": {"sv": "English", "en": "English"},
        "description": {"sv": "Use English in the app", "en": "Use English in the app"},
    },
]

GENDER_OPTIONS = [
    {"id": "female", "label": {"sv": "Kvinna", "en": "Female"}},
    {"id": "male", "label": {"sv": "Man", "en": "Male"}},
    {"id": "other", "label": {"sv": "Annat", "en": "Other"}},
]

COUNTRY_SUGGESTIONS = ["Sverige", "Norge", "Danmark", "Finland"]

GOAL_OPTIONS = [
    {
        "id": "lose_weight",
        "label": {"sv": "Gå ner i vikt", "en": "Lose weight"},
        "description": {"sv": "Minska kroppsvikt och fett", "en": "Reduce body weight and fat"},
    },
    {
        "id": "build_muscle",
        "label": {"sv": "Bygga muskler", "en": "Build muscle"},
        "description": {"sv": "Öka muskelmassa och styrka", "en": "Increase muscle mass and strength"},
    },
    {
        "id": "stay_healthy",
        "label": {"sv": "Bli hälsosam", "en": "Stay healthy"},
        "description": {
            "sv": "Förbättra allmän hälsa och välbefinnande",
            "en": "Improve general health and well-being",
        },
    },
    {
        "id": "increase_energy",
        "label": {"sv": "Öka energi", "en": "Increase energy"},
        "description": {"sv": "Få mer energi i vardagen", "en": "Have more energy in everyday life"},
    },
]

WORKOUT_OPTIONS = [
    {
        "id": "home_workout",
        "icon": "🏠",
        "label": {"sv": "Hemmaträning", "en": "Home workout"},
        "description": {"sv": "Träna hemma utan utrustning", "en": "Train at home without equipment"},
    },
    {
        "id": "gym",
        "icon": "🏋️",
        "label": {"sv": "Gym", "en": "Gym"},
        "description": {"sv": "Träning med vikter och maskiner", "en": "Training with weights and machines"},
    },
    {
        "id": "outdoor",
        "icon": "🌳",
        "label": {"sv": "Utomhus", "en": "Outdoor"},
        "description": {"sv": "Löpning, vandring, cykling", "en": "Running, hiking, cycling"},
    },
    {
        "id": "swimming",
        "icon": "🏊",
        "label": {"sv": "Simning", "en": "Swimming"},
        "description": {"sv": "Simning och vattenträning", "en": "Swimming and water training"},
    },
    {
        "id": "group_classes",
        "icon": "👥",
        "label": {"sv": "Gruppträning", "en": "Group classes"},
        "description": {"sv": "Yoga, spinning, aerobics", "en": "Yoga, spinning, aerobics"},
    },
]

PREFERENCE_OPTIONS = [
    {
        "id": "meal_plan",
        "icon": "🍽️",
        "label": {"sv": "Endast kostschema", "en": "Meal plan only"},
        "description": {"sv": "Personliga måltidsplaner och recept", "en": "Personal meal plans and recipes"},
    },
    {
        "id": "workout_plan",
        "icon": "💪",
        "label": {"sv": "Endast träningsschema", "en": "Workout plan only"},
        "description": {"sv": "Anpassade träningsprogram", "en": "Tailored training programs"},
    },
    {
        "id": "both",
        "icon": "🎯",
        "label": {"sv": "Båda delarna", "en": "Both"},
        "description": {
            "sv": "Komplett kostschema + träningsschema (rekommenderat)",
            "en": "Complete meal plan + workout plan (recommended)",
        },
    },
]

STEP_TITLES = {
    OnboardingStep.LANGUAGE: {"sv": "Välj språk", "en": "Choose language"},
    OnboardingStep.PERSONAL: {"sv": "Personlig information", "en": "Personal information"},
    OnboardingStep.BODY: {"sv": "Kroppsmått", "en": "Body measurements"},
    OnboardingStep.LOCATION: {"sv": "Var bor du?", "en": "Where do you live?"},
    OnboardingStep.GOALS: {"sv": "Dina mål", "en": "Your goals"},
    OnboardingStep.WORKOUTS: {"sv": "Träningsformer", "en": "Workout types"},
    OnboardingStep.PREFERENCES: {"sv": "Vad vill du ha hjälp med?", "en": "What do you want help with?"},
}


# =============================================================================
# Field Update Messages
# =============================================================================

# Empty while the user is still typing, otherwise digits with an optional
# decimal part ("72", "72.5", "72,5")
NumericString = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^(\d+([.,]\d+)?)?$")]

# Surrounding whitespace is dropped, so a blank entry counts as unset
TextString = Annotated[str, StringConstraints(strip_whitespace=True)]


class _Update(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class LanguageUpdate(_Update):
    field: Literal["language"]
    value: Language


class GenderUpdate(_Update):
    field: Literal["gender"]
    value: Gender | None


class AgeUpdate(_Update):
    field: Literal["age"]
    value: NumericString


class WeightUpdate(_Update):
    field: Literal["weight"]
    value: NumericString


class HeightUpdate(_Update):
    field: Literal["height"]
    value: NumericString


class CountryUpdate(_Update):
    field: Literal["country"]
    value: TextString


class AddressUpdate(_Update):
    field: Literal["address"]
    value: TextString


class PreferencesUpdate(_Update):
    field: Literal["preferences"]
    value: ContentPreference | None


class AllergiesUpdate(_Update):
    field: Literal["allergies"]
    value: TextString


FieldUpdate = Annotated[
    Union[
        LanguageUpdate,
        GenderUpdate,
        AgeUpdate,
        WeightUpdate,
        HeightUpdate,
        CountryUpdate,
        AddressUpdate,
        PreferencesUpdate,
        AllergiesUpdate,
    ],
    Field(discriminator="field"),
]


class GoalToggle(_Update):
    field: Literal["goals"]
    value: GoalTag


class WorkoutTypeToggle(_Update):
    field: Literal["workout_types"]
    value: WorkoutTag


ToggleUpdate = Annotated[
    Union[GoalToggle, WorkoutTypeToggle],
    Field(discriminator="field"),
]

_field_update_adapter: TypeAdapter = TypeAdapter(FieldUpdate)
_toggle_update_adapter: TypeAdapter = TypeAdapter(ToggleUpdate)

MULTI_VALUE_FIELDS = {"goals", "workout_types"}


def _validation_details(e: ValidationError) -> list[dict]:
    return [
        {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
        for err in e.errors(include_url=False, include_context=False, include_input=False)
    ]


def parse_field_update(field: str, value: object) -> FieldUpdate:
    """
    Build a typed update for one scalar field.

    Raises:
        InvalidFieldUpdate: unknown field, multi-select field, or wrong value type
    """
    if field in MULTI_VALUE_FIELDS:
        raise InvalidFieldUpdate(f"'{field}' is a multi-select field; toggle its values instead")
    try:
        return _field_update_adapter.validate_python({"field": field, "value": value})
    except ValidationError as e:
        logger.debug(f"Rejected update for {field!r}: {value!r}")
        raise InvalidFieldUpdate(f"Invalid value for field '{field}'", details=_validation_details(e))


def parse_toggle_update(field: str, value: object) -> ToggleUpdate:
    """
    Build a typed toggle for a multi-select field (goals / workout_types).

    Raises:
        InvalidFieldUpdate: not a multi-select field, or unknown tag
    """
    try:
        return _toggle_update_adapter.validate_python({"field": field, "value": value})
    except ValidationError as e:
        logger.debug(f"Rejected toggle for {field!r}: {value!r}")
        raise InvalidFieldUpdate(f"Invalid toggle for field '{field}'", details=_validation_details(e))


# =============================================================================
# API Response Helpers
# =============================================================================

def _localize(options: list[dict], language: str) -> list[dict]:
    localized = []
    for option in options:
        item = {"id": option["id"], "label": option["label"][language]}
        if "description" in option:
            item["description"] = option["description"][language]
        if "icon" in option:
            item["icon"] = option["icon"]
        localized.append(item)
    return localized


def get_form_options(language: str = "sv") -> dict:
    """
    Get all wizard options for frontend rendering, in the given UI language.

    Returns dict with:
    - steps: step number + title, in order
    - languages / genders / goals / workout_types / preferences: localized options
    - countries: country suggestions (free text is also accepted)
    """
    if language not in ("sv", "en"):
        logger.info(f"Unknown UI language {language!r}, falling back to sv")
        language = "sv"

    return {
        "language": language,
        "steps": [
            {"step": int(step), "title": titles[language]}
            for step, titles in STEP_TITLES.items()
        ],
        "languages": _localize(LANGUAGE_OPTIONS, language),
        "genders": _localize(GENDER_OPTIONS, language),
        "countries": COUNTRY_SUGGESTIONS,
        "goals": _localize(GOAL_OPTIONS, language),
        "workout_types": _localize(WORKOUT_OPTIONS, language),
        "preferences": _localize(PREFERENCE_OPTIONS, language),
    }
