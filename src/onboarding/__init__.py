"""
FitCoach Onboarding Wizard.

Seven-step flow that collects what the coach needs before building plans:

1. Language
2. Personal info (gender, age)
3. Body measurements (weight, height)
4. Location (country, address)
5. Goals (multi-select)
6. Workout types (multi-select)
7. Preferences (meal plan / workout plan / both) + allergies

The wizard accumulates answers in memory and hands them to a profile-save
collaborator once, at completion.
"""

from .state import OnboardingAnswers, OnboardingStep, TOTAL_STEPS, can_advance
from .wizard import OnboardingWizard
from .payload import FitnessProfile, build_profile_from_answers
from .profiles import InMemoryProfileStore, ProfileSaver

__all__ = [
    "OnboardingAnswers",
    "OnboardingStep",
    "TOTAL_STEPS",
    "can_advance",
    "OnboardingWizard",
    "FitnessProfile",
    "build_profile_from_answers",
    "InMemoryProfileStore",
    "ProfileSaver",
]
