"""
Onboarding Wizard.

Owns the step cursor, the accumulated answers and the final submit. The
presentation layer (web API, terminal) renders the current step, feeds user
input in through set_field / toggle_multi_value, and enables its "next" and
"complete" controls from can_advance / can_complete.

Step rules are advisory by default: go_next moves the cursor even when the
current step is incomplete, because the UI is expected to keep the control
disabled. With enforce_step_rules=True the wizard enforces the rules itself
(go_next refuses to move, complete raises StepIncomplete).

Usage:
    wizard = OnboardingWizard(saver=InMemoryProfileStore())
    wizard.set_field("language", "en")
    if wizard.can_advance():
        wizard.go_next()
    ...
    ok = await wizard.complete()
"""

import asyncio
import contextlib
import logging
from typing import Callable

from .errors import StepIncomplete, SubmissionInProgress, WizardClosed
from .forms import STEP_TITLES, FieldUpdate, parse_field_update, parse_toggle_update
from .profiles import ProfileSaver
from .state import (
    FIRST_STEP,
    TOTAL_STEPS,
    OnboardingAnswers,
    OnboardingStep,
    can_advance,
    missing_fields,
    progress_percent,
)

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = "/dashboard"


class OnboardingWizard:
    """
    Seven-step onboarding wizard.

    State:
        step: current step, 1..TOTAL_STEPS
        answers: accumulated OnboardingAnswers
        submitting: True while the profile save is in flight
        completed / destination: set after a successful save
        last_error: message of the last failed save, for display
    """

    def __init__(
        self,
        saver: ProfileSaver,
        destination: str = DEFAULT_DESTINATION,
        enforce_step_rules: bool = False,
        answers: OnboardingAnswers | None = None,
        on_navigate: Callable[[str], None] | None = None,
    ) -> None:
        self.step: int = int(FIRST_STEP)
        self.answers = answers if answers is not None else OnboardingAnswers()
        self.submitting = False
        self.completed = False
        self.destination: str | None = None
        self.last_error: str | None = None
        self.enforce_step_rules = enforce_step_rules

        self._saver = saver
        self._target = destination
        self._on_navigate = on_navigate
        self._pending: asyncio.Task | None = None
        self._closed = False

    @classmethod
    def from_settings(cls, saver: ProfileSaver, **kwargs) -> "OnboardingWizard":
        """Build a wizard with defaults taken from FitCoach settings."""
        from fitcoach.config import get_settings

        settings = get_settings()
        answers = OnboardingAnswers(
            language=settings.default_language,
            country=settings.default_country,
        )
        kwargs.setdefault("destination", settings.post_onboarding_destination)
        kwargs.setdefault("enforce_step_rules", settings.onboarding_enforce_step_rules)
        return cls(saver=saver, answers=answers, **kwargs)

    # -------------------------------------------------------------------------
    # Answers
    # -------------------------------------------------------------------------

    def set_field(self, field: str, value: object) -> None:
        """
        Overwrite one scalar field.

        Only the value's type is checked (InvalidFieldUpdate on mismatch);
        whether the step is complete is up to can_advance.
        """
        self.apply(parse_field_update(field, value))

    def apply(self, update: FieldUpdate) -> None:
        """Apply an already-validated field update."""
        setattr(self.answers, update.field, update.value)
        logger.debug(f"Step {self.step}: {update.field} updated")

    def toggle_multi_value(self, field: str, value: str) -> None:
        """Add the tag to goals / workout_types, or remove it if already there."""
        toggle = parse_toggle_update(field, value)
        values: list[str] = getattr(self.answers, toggle.field)
        if toggle.value in values:
            values.remove(toggle.value)
        else:
            values.append(toggle.value)

    # -------------------------------------------------------------------------
    # Step rules
    # -------------------------------------------------------------------------

    def can_advance(self, step: int | None = None) -> bool:
        """Whether the given step (default: current) is complete."""
        return can_advance(self.answers, self.step if step is None else step)

    def missing_fields(self, step: int | None = None) -> list[str]:
        return missing_fields(self.answers, self.step if step is None else step)

    def can_complete(self) -> bool:
        """Whether the "complete" control should be enabled."""
        return (
            self.step == TOTAL_STEPS
            and self.can_advance(TOTAL_STEPS)
            and not self.submitting
            and not self.completed
            and not self._closed
        )

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def go_next(self) -> bool:
        """Move one step forward. Returns False if the cursor did not move."""
        if self.step >= TOTAL_STEPS:
            return False
        if self.enforce_step_rules and not self.can_advance():
            logger.debug(f"Step {self.step} incomplete, staying: {self.missing_fields()}")
            return False
        self.step += 1
        logger.debug(f"Onboarding step {self.step - 1} -> {self.step}")
        return True

    def go_previous(self) -> bool:
        """Move one step back. Never re-validates, never clears answers."""
        if self.step <= FIRST_STEP:
            return False
        self.step -= 1
        logger.debug(f"Onboarding step {self.step + 1} -> {self.step}")
        return True

    def progress(self) -> tuple[int, int, int]:
        """(step, total, percent) for the progress bar."""
        return self.step, TOTAL_STEPS, progress_percent(self.step)

    # -------------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------------

    async def complete(self) -> bool:
        """
        Save the answers and move on to the post-onboarding destination.

        Calls the saver exactly once with a snapshot of the answers. On
        failure the error is logged and kept in last_error; answers and step
        are left untouched so the user can retry.

        Returns:
            True if the profile was saved, False if the save failed or the
            wizard was closed while it was in flight.

        Raises:
            SubmissionInProgress: a previous complete() is still running
            WizardClosed: the wizard was closed or has already completed
            StepIncomplete: strict mode only, final step not reached/filled
        """
        if self._closed:
            raise WizardClosed("Onboarding wizard is closed")
        if self.completed:
            raise WizardClosed("Onboarding already completed")
        if self.submitting:
            raise SubmissionInProgress("Onboarding is already being saved")
        if self.enforce_step_rules and not (
            self.step == TOTAL_STEPS and self.can_advance(TOTAL_STEPS)
        ):
            raise StepIncomplete(self.step, self.missing_fields(TOTAL_STEPS))

        self.submitting = True
        self.last_error = None
        snapshot = self.answers.copy()

        try:
            self._pending = asyncio.ensure_future(self._saver.save(snapshot))
            await self._pending
        except asyncio.CancelledError:
            if not self._closed:
                raise
            logger.info("Onboarding save cancelled, wizard closed")
            self.last_error = "Cancelled"
            return False
        except Exception as e:
            logger.error(f"Failed to save onboarding: {e}")
            self.last_error = str(e) or e.__class__.__name__
            return False
        finally:
            self.submitting = False
            self._pending = None

        self.completed = True
        self.destination = self._target
        logger.info(f"Onboarding completed, redirecting to {self.destination}")

        if self._on_navigate is not None:
            self._on_navigate(self.destination)
        return True

    async def close(self) -> None:
        """
        Tear the wizard down.

        Cancels an in-flight save; a pending complete() then returns False.
        """
        self._closed = True
        pending = self._pending
        if pending is not None and not pending.done():
            pending.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await pending

    @property
    def closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Presentation
    # -------------------------------------------------------------------------

    def snapshot(self) -> dict:
        """Full wizard state for rendering / API responses."""
        step, total, percent = self.progress()
        return {
            "step": step,
            "total_steps": total,
            "percent": percent,
            "title": STEP_TITLES[OnboardingStep(step)][self.answers.language],
            "answers": self.answers.to_dict(),
            "can_advance": self.can_advance(),
            "can_complete": self.can_complete(),
            "missing_fields": self.missing_fields(),
            "submitting": self.submitting,
            "completed": self.completed,
            "destination": self.destination,
            "last_error": self.last_error,
        }
