"""Versioned persistence of plan patches.

Applying a patch:
1. computes the next plan value (pure, mentor.plans.apply)
2. appends a new TrainingPlanVersion / NutritionPlanVersion (version = last + 1)
3. points StudentState at the new version
4. records a ChangeEvent and publishes a domain event

The caller owns the transaction (pass the session from get_session()).
"""

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mentor.db.models import ChangeEvent, NutritionPlanVersion, StudentState, TrainingPlanVersion
from mentor.db.unique import insert_unique
from mentor.events.publish import DomainEvent, DomainEventType, get_or_create_state, publish
from mentor.plans.apply import apply_nutrition_patch_to_summary, apply_training_patch_to_days
from mentor.plans.errors import PlanVersionConflictError
from mentor.plans.types import NutritionPatch, NutritionSummary, PreviewDay, TrainingPatch

MAX_VERSION_ATTEMPTS = 3


@dataclass
class AppliedVersion:
    """Result of persisting a patch."""

    id: str
    version: int


def next_training_version(session: Session, user_id: str) -> int:
    last = session.execute(
        select(func.max(TrainingPlanVersion.version)).where(TrainingPlanVersion.user_id == user_id)
    ).scalar()
    return (last or 0) + 1


def next_nutrition_version(session: Session, user_id: str) -> int:
    last = session.execute(
        select(func.max(NutritionPlanVersion.version)).where(NutritionPlanVersion.user_id == user_id)
    ).scalar()
    return (last or 0) + 1


def _insert_next_version(
    session: Session,
    model: type,
    next_version: Callable[[Session, str], int],
    *,
    user_id: str,
    **values,
):
    """Insert a row at the next version number.

    Another request may take the same number between the read and the insert;
    the unique (user_id, version) constraint rejects it and the number is read again.

    Raises:
        PlanVersionConflictError: If every attempt lost the race
    """
    for _ in range(MAX_VERSION_ATTEMPTS):
        version_number = next_version(session, user_id)
        row = model(user_id=user_id, version=version_number, **values)
        if insert_unique(session, row):
            return row
        logger.warning(f"{model.__name__} v{version_number} already taken for user_id={user_id}, retrying")
    raise PlanVersionConflictError(f"Could not allocate a {model.__name__} number for user_id={user_id}")


def get_current_training_version(session: Session, user_id: str) -> TrainingPlanVersion | None:
    """Get the user's current training version, if any."""
    state = session.get(StudentState, user_id)
    if state is None or not state.current_training_plan_version_id:
        return None
    return session.get(TrainingPlanVersion, state.current_training_plan_version_id)


def get_current_nutrition_version(session: Session, user_id: str) -> NutritionPlanVersion | None:
    """Get the user's current nutrition version, if any."""
    state = session.get(StudentState, user_id)
    if state is None or not state.current_nutrition_plan_version_id:
        return None
    return session.get(NutritionPlanVersion, state.current_nutrition_plan_version_id)


def days_from_version(version: TrainingPlanVersion) -> list[PreviewDay]:
    return [PreviewDay.model_validate(d) for d in version.days]


def summary_from_version(version: NutritionPlanVersion) -> NutritionSummary:
    return NutritionSummary(
        kcal=version.kcal,
        protein_grams=version.protein_grams,
        carbs_grams=version.carbs_grams,
        fat_grams=version.fat_grams,
    )


def create_training_version(
    session: Session,
    *,
    user_id: str,
    days: list[PreviewDay],
    source: str,
    reason: str,
) -> AppliedVersion:
    """Append a training version, make it current, and log the change.

    Args:
        session: Database session
        user_id: Owning user
        days: Full training week to store
        source: Version source (preview, rule, manual, action)
        reason: Human-readable reason stored on the version and change event

    Returns:
        AppliedVersion with the new row id and version number
    """
    row = _insert_next_version(
        session,
        TrainingPlanVersion,
        next_training_version,
        user_id=user_id,
        source=source,
        reason=reason,
        days=[d.model_dump(exclude_none=True) for d in days],
    )
    version_number = row.version

    state = get_or_create_state(session, user_id)
    state.current_training_plan_version_id = row.id
    session.add(ChangeEvent(user_id=user_id, type="PLAN_EDIT", summary=reason, ref_id=row.id))
    session.flush()

    publish(session, DomainEvent(type=DomainEventType.PLAN_UPDATED, user_id=user_id))
    logger.info(f"Created training plan version {version_number} for user_id={user_id} (source={source})")
    return AppliedVersion(id=row.id, version=version_number)


def create_nutrition_version(
    session: Session,
    *,
    user_id: str,
    summary: NutritionSummary,
    source: str,
    reason: str,
) -> AppliedVersion:
    """Append a nutrition version, make it current, and log the change."""
    row = _insert_next_version(
        session,
        NutritionPlanVersion,
        next_nutrition_version,
        user_id=user_id,
        source=source,
        reason=reason,
        kcal=summary.kcal,
        protein_grams=summary.protein_grams,
        carbs_grams=summary.carbs_grams,
        fat_grams=summary.fat_grams,
    )
    version_number = row.version

    state = get_or_create_state(session, user_id)
    state.current_nutrition_plan_version_id = row.id
    session.add(ChangeEvent(user_id=user_id, type="NUTRITION_EDIT", summary=reason, ref_id=row.id))
    session.flush()

    publish(session, DomainEvent(type=DomainEventType.NUTRITION_UPDATED, user_id=user_id))
    logger.info(f"Created nutrition plan version {version_number} for user_id={user_id} (source={source})")
    return AppliedVersion(id=row.id, version=version_number)


def apply_training_patch(
    session: Session,
    user_id: str,
    current_days: list[PreviewDay],
    patch: TrainingPatch,
) -> AppliedVersion:
    """Apply a training patch to the current week and store the result."""
    days = apply_training_patch_to_days(current_days, patch)
    return create_training_version(session, user_id=user_id, days=days, source="action", reason=patch.reason.as_text())


def apply_nutrition_patch(
    session: Session,
    user_id: str,
    patch: NutritionPatch,
    current: NutritionSummary | None = None,
) -> AppliedVersion:
    """Apply a nutrition patch on top of the current targets and store the result."""
    summary = apply_nutrition_patch_to_summary(current, patch)
    return create_nutrition_version(session, user_id=user_id, summary=summary, source="action", reason=patch.reason.as_text())
