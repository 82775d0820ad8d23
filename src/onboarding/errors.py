"""
Onboarding error classes.

Each error carries a machine-readable code so the HTTP layer can map it to a
status without string matching.
"""


class OnboardingError(Exception):
    """Base class for onboarding wizard errors."""

    code = "ONBOARDING_ERROR"

    def __init__(self, message: str, details: list[dict] | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidFieldUpdate(OnboardingError):
    """Field name and value type do not agree (unknown field, bad tag, non-numeric age...)."""

    code = "INVALID_FIELD_UPDATE"


class StepIncomplete(OnboardingError):
    """Strict mode: the current step's rule is not satisfied."""

    code = "STEP_INCOMPLETE"

    def __init__(self, step: int, missing: list[str]) -> None:
        self.step = step
        self.missing = missing
        super().__init__(
            f"Step {step} is incomplete (missing: {', '.join(missing) or 'n/a'})",
            details=[{"field": name} for name in missing],
        )


class SubmissionInProgress(OnboardingError):
    """A completion is already being saved."""

    code = "SUBMISSION_IN_PROGRESS"


class WizardClosed(OnboardingError):
    """The wizard was torn down and can no longer submit."""

    code = "WIZARD_CLOSED"


class ProfileSaveError(OnboardingError):
    """The profile-save collaborator failed to store the answers."""

    code = "PROFILE_SAVE_FAILED"
