"""
Profile-save collaborator.

The wizard only knows the ProfileSaver protocol: one async ``save`` call per
completion, raising on failure. InMemoryProfileStore is the implementation the
app runs with until a real backend is wired in.
"""

import asyncio
import logging
import uuid
from typing import Protocol

from .errors import ProfileSaveError
from .payload import FitnessProfile, build_profile_from_answers, get_profile_summary
from .state import OnboardingAnswers

logger = logging.getLogger(__name__)


class ProfileSaver(Protocol):
    """Anything that can persist a finished set of onboarding answers."""

    async def save(self, answers: OnboardingAnswers) -> None:
        """Store the answers. Raise (ProfileSaveError or otherwise) on failure."""
        ...


class InMemoryProfileStore:
    """
    Keeps completed profiles in a dict.

    Args:
        delay_seconds: Simulated backend latency per save
        fail_with: If set, every save raises this message as ProfileSaveError
    """

    def __init__(self, delay_seconds: float = 0.0, fail_with: str | None = None) -> None:
        self.delay_seconds = delay_seconds
        self.fail_with = fail_with
        self.profiles: dict[str, FitnessProfile] = {}
        self.save_count = 0

    async def save(self, answers: OnboardingAnswers) -> None:
        self.save_count += 1

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.fail_with:
            raise ProfileSaveError(self.fail_with)

        profile = build_profile_from_answers(answers)
        profile_id = str(uuid.uuid4())
        self.profiles[profile_id] = profile

        logger.info(f"Stored profile {profile_id}: {get_profile_summary(profile)}")

    def latest(self) -> FitnessProfile | None:
        """Most recently stored profile, if any."""
        if not self.profiles:
            return None
        return next(reversed(self.profiles.values()))
