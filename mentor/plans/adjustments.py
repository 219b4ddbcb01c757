"""Coach-initiated and automated plan adjustments.

Glue between the pure patch rules and versioned persistence: load the
current plan, compute a patch, store the patched plan as a new version.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy.orm import Session

from mentor.db.models import Profile
from mentor.plans.errors import NoCurrentPlanError
from mentor.plans.materialize import (
    apply_nutrition_patch,
    apply_training_patch,
    days_from_version,
    get_current_nutrition_version,
    get_current_training_version,
    summary_from_version,
)
from mentor.plans.nutrition import nutrition_from_profile
from mentor.plans.profile import Injury, ProfileSnapshot
from mentor.plans.safety import clamp_kcal
from mentor.plans.training import (
    apply_injury_substitutions,
    patch_deload,
    patch_progression,
    patch_set_days_per_week,
    patch_swap_exercise,
)
from mentor.plans.types import NutritionPatch, NutritionSummary, PatchReason, PreviewDay, TrainingPatch


@dataclass
class AdjustmentResult:
    summary: str
    version: int | None
    applied: bool = True


def current_days(session: Session, user_id: str) -> list[PreviewDay]:
    """Current training week of a user.

    Raises:
        NoCurrentPlanError: If the user has no training plan yet
    """
    version = get_current_training_version(session, user_id)
    if version is None:
        raise NoCurrentPlanError(f"No current training plan for user_id={user_id}")
    return days_from_version(version)


def _apply(session: Session, user_id: str, days: list[PreviewDay], patch: TrainingPatch) -> AdjustmentResult:
    applied = apply_training_patch(session, user_id, days, patch)
    logger.info(f"Training adjustment for user_id={user_id}: {patch.reason.summary} (version {applied.version})")
    return AdjustmentResult(summary=patch.reason.summary, version=applied.version)


def swap_exercise(session: Session, user_id: str, day: str, from_name: str, to_name: str) -> AdjustmentResult:
    days = current_days(session, user_id)
    return _apply(session, user_id, days, patch_swap_exercise(days, day, from_name, to_name))


def set_days_per_week(session: Session, user_id: str, days_per_week: int) -> AdjustmentResult:
    days = current_days(session, user_id)
    return _apply(session, user_id, days, patch_set_days_per_week(days, days_per_week))


def progress(session: Session, user_id: str) -> AdjustmentResult:
    days = current_days(session, user_id)
    return _apply(session, user_id, days, patch_progression(days))


def deload(session: Session, user_id: str) -> AdjustmentResult:
    days = current_days(session, user_id)
    return _apply(session, user_id, days, patch_deload(days))


def adjust_for_injuries(session: Session, user_id: str, injuries: list[Injury]) -> AdjustmentResult:
    """Apply injury substitutions; nothing is stored when none apply."""
    days = current_days(session, user_id)
    patch = apply_injury_substitutions(days, injuries)
    if patch is None:
        logger.info(f"No injury substitutions apply for user_id={user_id}, injuries={[str(i) for i in injuries]}")
        return AdjustmentResult(summary="No substitutions needed", version=None, applied=False)
    return _apply(session, user_id, days, patch)


def _current_nutrition(session: Session, user_id: str) -> NutritionSummary | None:
    version = get_current_nutrition_version(session, user_id)
    return summary_from_version(version) if version else None


def nutrition_from_stored_profile(session: Session, user_id: str) -> AdjustmentResult:
    """Recompute macros from the stored profile and store them as a new version."""
    profile = session.get(Profile, user_id)
    if profile is None:
        raise NoCurrentPlanError(f"No profile for user_id={user_id}")
    patch = nutrition_from_profile(ProfileSnapshot.model_validate(profile, from_attributes=True))
    applied = apply_nutrition_patch(session, user_id, patch, current=_current_nutrition(session, user_id))
    return AdjustmentResult(summary=patch.reason.summary, version=applied.version)


def set_kcal(session: Session, user_id: str, kcal: int) -> AdjustmentResult:
    """Set daily kcal explicitly; macros keep their current values."""
    current = _current_nutrition(session, user_id)
    if current is None:
        raise NoCurrentPlanError(f"No current nutrition plan for user_id={user_id}")
    clamped = clamp_kcal(kcal)
    patch = NutritionPatch(kcal=clamped, reason=PatchReason(summary=f"Calories set to {clamped}"))
    applied = apply_nutrition_patch(session, user_id, patch, current=current)
    return AdjustmentResult(summary=patch.reason.summary, version=applied.version)
