"""
Onboarding API Endpoints.

Thin HTTP layer over OnboardingWizard. Wizards live in an in-memory session
registry for as long as the user is in the flow; a session is dropped when the
user completes onboarding, navigates away (DELETE), or leaves it untouched for
longer than the session TTL.

This layer plays the part of the frontend's disabled buttons: "next" and
"complete" answer 409 while the current step is incomplete.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from .errors import (
    InvalidFieldUpdate,
    OnboardingError,
    StepIncomplete,
    SubmissionInProgress,
    WizardClosed,
)
from .forms import get_form_options
from .profiles import InMemoryProfileStore
from .wizard import OnboardingWizard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/onboarding", tags=["onboarding"])

# Simple in-memory session store (no persistence by design of the flow)
sessions: dict[str, OnboardingWizard] = {}
last_seen: dict[str, datetime] = {}

_profile_store: InMemoryProfileStore | None = None


# =============================================================================
# Dependencies
# =============================================================================


def get_profile_store() -> InMemoryProfileStore:
    """Shared profile store, created on first use from settings."""
    global _profile_store
    if _profile_store is None:
        from fitcoach.config import get_settings
        _profile_store = InMemoryProfileStore(
            delay_seconds=get_settings().profile_save_delay_seconds,
        )
    return _profile_store


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _drop_session(session_id: str) -> OnboardingWizard | None:
    last_seen.pop(session_id, None)
    return sessions.pop(session_id, None)


async def drop_expired_sessions() -> int:
    """Close and forget sessions nobody has touched within the TTL."""
    from fitcoach.config import get_settings

    cutoff = _now() - timedelta(minutes=get_settings().onboarding_session_ttl_minutes)
    expired = [sid for sid, seen in last_seen.items() if seen < cutoff]
    for sid in expired:
        wizard = _drop_session(sid)
        if wizard is not None:
            await wizard.close()
    if expired:
        logger.info(f"Dropped {len(expired)} expired onboarding session(s)")
    return len(expired)


async def get_wizard(session_id: str) -> OnboardingWizard:
    """Look up an active wizard or 404. Marks the session as touched."""
    await drop_expired_sessions()
    wizard = sessions.get(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Onboarding session not found")
    last_seen[session_id] = _now()
    return wizard


def _error(status_code: int, err: OnboardingError) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"code": err.code, "message": err.message, "details": err.details},
    )


# =============================================================================
# Request/Response Models
# =============================================================================


class FieldRequest(BaseModel):
    """Set one scalar answer."""
    field: str
    value: Any = None


class ToggleRequest(BaseModel):
    """Toggle one tag in goals / workout_types."""
    field: str
    value: str


class StateResponse(BaseModel):
    """Current wizard state."""
    session_id: str
    step: int
    total_steps: int
    percent: int
    title: str
    answers: dict
    can_advance: bool
    can_complete: bool
    missing_fields: list[str]
    submitting: bool
    completed: bool
    destination: str | None = None
    last_error: str | None = None
    message: str = ""


class CompleteResponse(BaseModel):
    """Response after a successful completion."""
    success: bool
    redirect_to: str
    answers: dict
    message: str = ""


def _state(session_id: str, wizard: OnboardingWizard, message: str = "") -> StateResponse:
    return StateResponse(session_id=session_id, message=message, **wizard.snapshot())


# =============================================================================
# Endpoints: Options & Sessions
# =============================================================================


@router.get("/options")
async def get_onboarding_options(language: str = "sv"):
    """
    Get option catalogs for every step.

    Returns step titles, genders, country suggestions, goals, workout types and
    plan preferences, localized to the requested UI language.
    """
    return get_form_options(language)


@router.post("/sessions", response_model=StateResponse)
async def start_onboarding(store: InMemoryProfileStore = Depends(get_profile_store)) -> StateResponse:
    """Start a new onboarding wizard at step 1."""
    await drop_expired_sessions()
    session_id = secrets.token_urlsafe(16)
    wizard = OnboardingWizard.from_settings(saver=store)
    sessions[session_id] = wizard
    last_seen[session_id] = _now()
    logger.info(f"Onboarding session {session_id[:6]}… started")
    return _state(session_id, wizard)


@router.get("/sessions/{session_id}", response_model=StateResponse)
async def get_onboarding_state(session_id: str, wizard: OnboardingWizard = Depends(get_wizard)) -> StateResponse:
    """Get current onboarding progress."""
    return _state(session_id, wizard)


@router.delete("/sessions/{session_id}")
async def abandon_onboarding(session_id: str, wizard: OnboardingWizard = Depends(get_wizard)):
    """
    Leave the wizard. Answers are discarded; an in-flight save is cancelled.
    """
    _drop_session(session_id)
    await wizard.close()
    logger.info(f"Onboarding session {session_id[:6]}… abandoned at step {wizard.step}")
    return {"success": True}


# =============================================================================
# Endpoints: Answers
# =============================================================================


@router.post("/sessions/{session_id}/field", response_model=StateResponse)
async def set_onboarding_field(
    session_id: str,
    request: FieldRequest,
    wizard: OnboardingWizard = Depends(get_wizard),
) -> StateResponse:
    """Set one answer (language, gender, age, weight, height, country, address, preferences, allergies)."""
    try:
        wizard.set_field(request.field, request.value)
    except InvalidFieldUpdate as e:
        raise _error(400, e)
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/toggle", response_model=StateResponse)
async def toggle_onboarding_value(
    session_id: str,
    request: ToggleRequest,
    wizard: OnboardingWizard = Depends(get_wizard),
) -> StateResponse:
    """Toggle a goal or workout type."""
    try:
        wizard.toggle_multi_value(request.field, request.value)
    except InvalidFieldUpdate as e:
        raise _error(400, e)
    return _state(session_id, wizard)


# =============================================================================
# Endpoints: Navigation
# =============================================================================


@router.post("/sessions/{session_id}/next", response_model=StateResponse)
async def next_step(session_id: str, wizard: OnboardingWizard = Depends(get_wizard)) -> StateResponse:
    """Move to the next step. 409 while the current step is incomplete."""
    if not wizard.can_advance():
        raise _error(409, StepIncomplete(wizard.step, wizard.missing_fields()))

    if not wizard.go_next():
        return _state(session_id, wizard, message="Already at the last step")
    return _state(session_id, wizard)


@router.post("/sessions/{session_id}/previous", response_model=StateResponse)
async def previous_step(session_id: str, wizard: OnboardingWizard = Depends(get_wizard)) -> StateResponse:
    """Go back one step. Always allowed; answers are kept."""
    if not wizard.go_previous():
        return _state(session_id, wizard, message="Already at the first step")
    return _state(session_id, wizard)


# =============================================================================
# Endpoints: Complete
# =============================================================================


@router.post("/sessions/{session_id}/complete", response_model=CompleteResponse)
async def complete_onboarding(session_id: str, wizard: OnboardingWizard = Depends(get_wizard)) -> CompleteResponse:
    """
    Finalize onboarding.

    1. Checks the wizard is on the last step with preferences chosen
    2. Saves the answers through the profile store
    3. Drops the session and returns where to redirect

    On a failed save the session is kept as-is so the user can retry.
    """
    if wizard.submitting:
        raise _error(409, SubmissionInProgress("Onboarding is already being saved"))
    if not wizard.can_complete():
        raise _error(409, StepIncomplete(wizard.step, wizard.missing_fields()))

    try:
        saved = await wizard.complete()
    except (SubmissionInProgress, StepIncomplete, WizardClosed) as e:
        raise _error(409, e)

    if not saved:
        raise HTTPException(
            status_code=502,
            detail={"code": "PROFILE_SAVE_FAILED", "message": wizard.last_error, "details": None},
        )

    _drop_session(session_id)
    logger.info(f"Onboarding session {session_id[:6]}… completed")

    return CompleteResponse(
        success=True,
        redirect_to=wizard.destination,
        answers=wizard.answers.to_dict(),
        message="Onboarding complete! Your plan is being prepared.",
    )
