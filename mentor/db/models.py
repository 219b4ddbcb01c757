from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all database models."""


class User(Base):
    """Platform user.

    Authentication lives outside this service; only the funnel status is
    tracked here:
    - VISITOR: started pre-onboarding
    - LEAD: answered at least one onboarding message
    - TRIAL / SUBSCRIBED: converted
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True, index=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="VISITOR")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)


class Profile(Base):
    """Self-reported fitness/nutrition profile, one per user.

    injuries is NULL until the user has answered the injury question; an
    empty list means "answered, no injuries".
    """

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), primary_key=True)
    goal: Mapped[str | None] = mapped_column(String, nullable=True)
    experience_level: Mapped[str | None] = mapped_column(String, nullable=True)
    body_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    diet: Mapped[str | None] = mapped_column(String, nullable=True)
    schedule: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    equipment: Mapped[list | None] = mapped_column(JSON, nullable=True)
    injuries: Mapped[list | None] = mapped_column(JSON, nullable=True)
    preferences: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    consent_health_data: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    consent_timestamp: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    collected_percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class PlanPreview(Base):
    """Latest generated plan preview. At most one row per user."""

    __tablename__ = "plan_previews"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    training_week: Mapped[list] = mapped_column(JSON, nullable=False)
    nutrition: Mapped[dict] = mapped_column(JSON, nullable=False)
    hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class TrainingPlanVersion(Base):
    """Append-only training plan history.

    source is one of: preview, rule, manual, action.
    """

    __tablename__ = "training_plan_versions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="action")
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    days: Mapped[list] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (UniqueConstraint("user_id", "version", name="uq_training_plan_versions_user_version"),)


class NutritionPlanVersion(Base):
    """Append-only nutrition plan history."""

    __tablename__ = "nutrition_plan_versions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="action")
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    kcal: Mapped[int] = mapped_column(Integer, nullable=False)
    protein_grams: Mapped[int] = mapped_column(Integer, nullable=False)
    carbs_grams: Mapped[int] = mapped_column(Integer, nullable=False)
    fat_grams: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (UniqueConstraint("user_id", "version", name="uq_nutrition_plan_versions_user_version"),)


class StudentState(Base):
    """Pointers to a user's current plan versions."""

    __tablename__ = "student_states"

    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), primary_key=True)
    current_training_plan_version_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("training_plan_versions.id"), nullable=True
    )
    current_nutrition_plan_version_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("nutrition_plan_versions.id"), nullable=True
    )
    snapshot_updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_event_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class StudentSnapshot(Base):
    """Denormalized dashboard summary, one per user."""

    __tablename__ = "student_snapshots"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    weight_series: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    training_plan_summary: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # {days_per_week}
    nutrition_summary: Mapped[dict | None] = mapped_column(JSON, nullable=True)  # {kcal, protein, carbs, fat}
    kpis: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)


class ChangeEvent(Base):
    """User-visible change log entry (PLAN_EDIT, NUTRITION_EDIT, ...)."""

    __tablename__ = "change_events"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), nullable=False)
    type: Mapped[str] = mapped_column(String, nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    ref_id: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)

    __table_args__ = (Index("idx_change_events_user_created", "user_id", "created_at"),)
