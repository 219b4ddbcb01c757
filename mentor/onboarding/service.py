"""Pre-onboarding orchestration service.

Handles the conversational intake before a user subscribes:
- collects profile fields incrementally and tracks completion
- generates the deterministic plan preview once completion crosses the threshold
- converts the preview into the first training/nutrition versions on trial/checkout

All functions take the caller's session; the caller owns the transaction.
"""

from __future__ import annotations

from datetime import datetime, timezone

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentor.config.settings import settings
from mentor.db.models import PlanPreview as PlanPreviewModel
from mentor.db.models import Profile, User
from mentor.db.unique import insert_unique
from mentor.events.publish import get_or_create_snapshot
from mentor.onboarding.completion import collected_percent
from mentor.onboarding.errors import ConsentRequiredError, PreviewNotFoundError
from mentor.onboarding.schemas import (
    ConsentResponse,
    ConvertResponse,
    MessageResponse,
    NextStep,
    ProfilePatch,
    StartResponse,
    StateResponse,
)
from mentor.plans.materialize import create_nutrition_version, create_training_version
from mentor.plans.preview import generate_deterministic_preview
from mentor.plans.profile import ProfileSnapshot
from mentor.plans.types import NutritionSummary, PlanPreview, PreviewDay

FIRST_MESSAGE = (
    "Hi! I'm your coach. Tell me briefly what you want to achieve, "
    "and I'll put together a first plan tailored to you."
)
FOLLOW_UP_QUESTION = "Roughly how much do you weigh right now, and how many days a week would you like to train?"
PREVIEW_CTA = ["BEGIN_TRIAL", "CHECKOUT"]
PREVIEW_REASON = "Initialized from preview"


def get_or_create_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user is None:
        user = User(id=user_id, status="VISITOR")
        if insert_unique(session, user):
            logger.info(f"Created user record for user_id={user_id}")
        else:
            user = session.get(User, user_id)
    return user


def get_or_create_profile(session: Session, user_id: str) -> Profile:
    profile = session.get(Profile, user_id)
    if profile is None:
        get_or_create_user(session, user_id)
        profile = Profile(user_id=user_id)
        if not insert_unique(session, profile):
            profile = session.get(Profile, user_id)
    return profile


def profile_snapshot(profile: Profile) -> ProfileSnapshot:
    """Build the engine's read-only snapshot from a stored profile."""
    return ProfileSnapshot.model_validate(profile, from_attributes=True)


def stored_preview(session: Session, user_id: str) -> PlanPreviewModel | None:
    return session.execute(select(PlanPreviewModel).where(PlanPreviewModel.user_id == user_id)).scalar_one_or_none()


def upsert_preview(session: Session, preview: PlanPreview) -> PlanPreviewModel:
    """Store a preview, replacing the user's previous one.

    Skips the write when the stored hash already matches. A preview stored
    concurrently for the same user is overwritten, never duplicated.
    """
    row = stored_preview(session, preview.user_id)

    if row is not None and row.hash == preview.hash:
        logger.debug(f"Preview unchanged for user_id={preview.user_id} (hash={preview.hash[:12]})")
        return row

    training_week = [d.model_dump(exclude_none=True) for d in preview.training_week]
    nutrition = preview.nutrition.model_dump(exclude_none=True)
    if row is None:
        row = PlanPreviewModel(
            user_id=preview.user_id,
            training_week=training_week,
            nutrition=nutrition,
            hash=preview.hash,
        )
        if insert_unique(session, row):
            logger.info(f"Stored plan preview for user_id={preview.user_id} (hash={preview.hash[:12]})")
            return row
        row = stored_preview(session, preview.user_id)

    row.training_week = training_week
    row.nutrition = nutrition
    row.hash = preview.hash
    session.flush()
    logger.info(f"Stored plan preview for user_id={preview.user_id} (hash={preview.hash[:12]})")
    return row


def preview_from_row(row: PlanPreviewModel) -> PlanPreview:
    return PlanPreview(
        user_id=row.user_id,
        training_week=[PreviewDay.model_validate(d) for d in row.training_week],
        nutrition=NutritionSummary.model_validate(row.nutrition),
        hash=row.hash,
    )


def start_preonboarding(session: Session, user_id: str) -> StartResponse:
    """Begin pre-onboarding: ensure user + empty profile exist.

    New users start as VISITOR; an existing status is kept.
    """
    user = get_or_create_user(session, user_id)
    get_or_create_profile(session, user_id)
    logger.info(f"Pre-onboarding started for user_id={user_id}")
    return StartResponse(first_message=FIRST_MESSAGE, status=user.status)


def handle_message(session: Session, user_id: str, message: str, patch: ProfilePatch | None) -> MessageResponse:
    """Merge a profile patch and generate the preview when enough is known.

    Args:
        session: Database session
        user_id: User ID
        message: Raw user message (echoed back)
        patch: Structured profile fields extracted from the message

    Returns:
        MessageResponse with completion and the next step

    Raises:
        ConsentRequiredError: If injuries are sent without health-data consent
    """
    profile = get_or_create_profile(session, user_id)
    updates = patch.model_dump(exclude_unset=True, mode="json") if patch else {}

    if updates.get("injuries") is not None and not profile.consent_health_data:
        logger.warning(f"Rejected injury data without consent for user_id={user_id}")
        raise ConsentRequiredError("Consent required to store injuries")

    for field, value in updates.items():
        setattr(profile, field, value)

    profile.collected_percent = collected_percent(profile)
    user = get_or_create_user(session, user_id)
    if user.status == "VISITOR":
        user.status = "LEAD"
    session.flush()

    preview_ready = profile.collected_percent >= settings.preview_completion_threshold
    if preview_ready:
        preview = generate_deterministic_preview(user_id, profile_snapshot(profile))
        upsert_preview(session, preview)

    logger.info(
        f"Onboarding message for user_id={user_id}: fields={sorted(updates)}, "
        f"collected={profile.collected_percent}%, preview_ready={preview_ready}"
    )

    if preview_ready:
        next_step = NextStep(type="PREVIEW_READY", cta=PREVIEW_CTA)
    else:
        next_step = NextStep(type="QUESTION", prompt=FOLLOW_UP_QUESTION)
    return MessageResponse(message_echo=message, collected_percent=profile.collected_percent, next=next_step)


def record_consent(session: Session, user_id: str, health_data: bool) -> ConsentResponse:
    profile = get_or_create_profile(session, user_id)
    now = datetime.now(timezone.utc)
    profile.consent_health_data = bool(health_data)
    profile.consent_timestamp = now
    session.flush()
    logger.info(f"Health data consent for user_id={user_id}: {profile.consent_health_data}")
    return ConsentResponse(consented=profile.consent_health_data, timestamp=now.isoformat())


def get_preview(session: Session, user_id: str) -> PlanPreview:
    """Load the stored preview.

    Raises:
        PreviewNotFoundError: If no preview was generated yet
    """
    row = stored_preview(session, user_id)
    if row is None:
        raise PreviewNotFoundError("No preview yet")
    return preview_from_row(row)


def convert(session: Session, user_id: str, plan_type: str) -> ConvertResponse:
    """Convert a lead to trial/subscriber and seed plans from the preview.

    Without a preview only the status changes.
    """
    user = get_or_create_user(session, user_id)
    user.status = "TRIAL" if plan_type == "TRIAL" else "SUBSCRIBED"
    session.flush()

    try:
        preview = get_preview(session, user_id)
    except PreviewNotFoundError:
        logger.info(f"Converted user_id={user_id} to {user.status} without a preview")
        return ConvertResponse()

    create_training_version(
        session, user_id=user_id, days=preview.training_week, source="preview", reason=PREVIEW_REASON
    )
    nutrition = preview.nutrition.model_copy(update={"rationale": None})
    create_nutrition_version(session, user_id=user_id, summary=nutrition, source="preview", reason=PREVIEW_REASON)
    snapshot = get_or_create_snapshot(session, user_id)

    logger.info(f"Converted user_id={user_id} to {user.status}; plans initialized from preview")
    return ConvertResponse(snapshot_id=snapshot.id)


def get_state(session: Session, user_id: str) -> StateResponse:
    user = session.get(User, user_id)
    profile = session.get(Profile, user_id)
    has_preview = (
        session.execute(select(PlanPreviewModel.id).where(PlanPreviewModel.user_id == user_id)).first() is not None
    )
    return StateResponse(
        status=user.status if user else "VISITOR",
        collected_fields_percent=profile.collected_percent if profile else 0,
        preview_ready=has_preview,
    )
