"""Pydantic request/response models for pre-onboarding."""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from mentor.plans.profile import Diet, Equipment, ExperienceLevel, Goal, Injury, Preferences, Schedule
from mentor.plans.types import PlanPreview


class ProfilePatch(BaseModel):
    """Partial profile update collected from one onboarding message.

    Only fields that are present in the payload are written.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    goal: Goal | None = Field(default=None, validation_alias=AliasChoices("goal", "goals"))
    experience_level: ExperienceLevel | None = None
    body_weight_kg: float | None = Field(default=None, gt=0, le=500)
    diet: Diet | None = None
    schedule: Schedule | None = None
    equipment: list[Equipment] | None = None
    injuries: list[Injury] | None = None
    preferences: Preferences | None = None


class StartRequest(BaseModel):
    user_id: str | None = None


class StartResponse(BaseModel):
    ok: bool = True
    first_message: str
    status: str


class MessageRequest(BaseModel):
    user_id: str | None = None
    message: str = ""
    patch: ProfilePatch | None = None


class NextStep(BaseModel):
    type: Literal["PREVIEW_READY", "QUESTION"]
    cta: list[str] | None = None
    prompt: str | None = None


class MessageResponse(BaseModel):
    ok: bool = True
    message_echo: str
    collected_percent: int
    next: NextStep


class ConsentRequest(BaseModel):
    user_id: str | None = None
    health_data: bool


class ConsentResponse(BaseModel):
    ok: bool = True
    consented: bool
    timestamp: str


class PreviewResponse(BaseModel):
    ok: bool = True
    preview: PlanPreview


class ConvertRequest(BaseModel):
    user_id: str | None = None
    plan_type: Literal["TRIAL", "SUBSCRIBED"]


class ConvertResponse(BaseModel):
    ok: bool = True
    activated: bool = True
    snapshot_id: str | None = Field(default=None, description="Student snapshot id when a preview was materialized")


class StateResponse(BaseModel):
    ok: bool = True
    status: str
    collected_fields_percent: int
    preview_ready: bool
