"""In-process domain event publishing.

Publishing an event:
- stamps StudentState.last_event_at (created on first event)
- refreshes the StudentSnapshot summary the event affects

Handlers run inside the caller's session so they commit or roll back
together with the change that produced the event.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import StrEnum

from loguru import logger
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session

from mentor.db.models import NutritionPlanVersion, StudentSnapshot, StudentState, TrainingPlanVersion
from mentor.db.unique import insert_unique


class DomainEventType(StrEnum):
    PLAN_UPDATED = "PLAN_UPDATED"
    NUTRITION_UPDATED = "NUTRITION_UPDATED"


class DomainEvent(BaseModel):
    type: DomainEventType
    user_id: str


def get_or_create_state(session: Session, user_id: str) -> StudentState:
    state = session.get(StudentState, user_id)
    if state is None:
        state = StudentState(user_id=user_id)
        if not insert_unique(session, state):
            state = session.get(StudentState, user_id)
    return state


def _stored_snapshot(session: Session, user_id: str) -> StudentSnapshot | None:
    return session.execute(select(StudentSnapshot).where(StudentSnapshot.user_id == user_id)).scalar_one_or_none()


def get_or_create_snapshot(session: Session, user_id: str) -> StudentSnapshot:
    snapshot = _stored_snapshot(session, user_id)
    if snapshot is None:
        snapshot = StudentSnapshot(user_id=user_id, weight_series=[], kpis={"adherence_7d": 0})
        if not insert_unique(session, snapshot):
            snapshot = _stored_snapshot(session, user_id)
    return snapshot


def training_days_per_week(days: list[dict]) -> int:
    """Count days with exercises; fall back to the number of days."""
    with_exercises = sum(1 for d in days if d.get("exercises"))
    return with_exercises or len(days)


def _refresh_training_summary(session: Session, state: StudentState) -> None:
    if not state.current_training_plan_version_id:
        return
    version = session.get(TrainingPlanVersion, state.current_training_plan_version_id)
    if version is None:
        return
    snapshot = get_or_create_snapshot(session, state.user_id)
    snapshot.training_plan_summary = {"days_per_week": training_days_per_week(version.days)}


def _refresh_nutrition_summary(session: Session, state: StudentState) -> None:
    if not state.current_nutrition_plan_version_id:
        return
    version = session.get(NutritionPlanVersion, state.current_nutrition_plan_version_id)
    if version is None:
        return
    snapshot = get_or_create_snapshot(session, state.user_id)
    snapshot.nutrition_summary = {
        "kcal": version.kcal,
        "protein": version.protein_grams,
        "carbs": version.carbs_grams,
        "fat": version.fat_grams,
    }


def publish(session: Session, event: DomainEvent) -> None:
    """Publish a domain event.

    Args:
        session: Database session of the change that produced the event
        event: Event to publish
    """
    now = datetime.now(timezone.utc)
    state = get_or_create_state(session, event.user_id)
    state.last_event_at = now

    if event.type == DomainEventType.PLAN_UPDATED:
        _refresh_training_summary(session, state)
    elif event.type == DomainEventType.NUTRITION_UPDATED:
        _refresh_nutrition_summary(session, state)

    state.snapshot_updated_at = now
    session.flush()
    logger.info(f"Published {event.type} for user_id={event.user_id}")
