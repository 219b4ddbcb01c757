"""Profile snapshot and normalization.

The profile is owned by the onboarding flow. The plan engine reads it as an
immutable snapshot and never mutates it. All defaults are applied in exactly
one place (normalize_profile) so the preview generator and the standalone
nutrition rule always see the same values.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

Goal = Literal["cut", "maintain", "gain"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
Diet = Literal["regular", "vegan", "vegetarian", "keto", "none"]
Equipment = Literal["gym", "home", "dumbbells", "barbell", "machines"]


class Injury(StrEnum):
    """Body areas a user can report as injured."""

    KNEE = "knee"
    SHOULDER = "shoulder"
    BACK = "back"
    ELBOW = "elbow"
    ANKLE = "ankle"
    HIP = "hip"
    NONE = "none"


class Schedule(BaseModel):
    days_per_week: int | None = Field(default=None, ge=0, le=7)
    preferred_days: list[str] = Field(default_factory=list)


class Preferences(BaseModel):
    likes: list[str] = Field(default_factory=list)
    hates: list[str] = Field(default_factory=list)


class ProfileSnapshot(BaseModel):
    """Read-only view of a user's self-reported profile.

    Every field is optional; missing values are filled by normalize_profile.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True, frozen=True)

    goal: Goal | None = Field(default=None, validation_alias=AliasChoices("goal", "goals"))
    experience_level: ExperienceLevel | None = None
    body_weight_kg: float | None = Field(default=None, gt=0)
    diet: Diet | None = None
    schedule: Schedule | None = None
    equipment: list[Equipment] | None = None
    injuries: list[Injury] | None = None
    preferences: Preferences | None = None


DEFAULT_GOAL: Goal = "maintain"
DEFAULT_EXPERIENCE_LEVEL: ExperienceLevel = "beginner"
DEFAULT_BODY_WEIGHT_KG = 70.0
DEFAULT_DIET: Diet = "regular"


@dataclass(frozen=True)
class NormalizedProfile:
    """Profile with every engine input resolved to a concrete value.

    Injuries are de-duplicated and sorted so downstream hashing does not
    depend on the order the user reported them in.
    """

    goal: Goal
    experience_level: ExperienceLevel
    body_weight_kg: float
    diet: Diet
    injuries: tuple[Injury, ...]

    @property
    def is_vegan(self) -> bool:
        return self.diet == "vegan"


def normalize_profile(profile: ProfileSnapshot | dict | None) -> NormalizedProfile:
    """Apply engine defaults to a profile snapshot.

    Args:
        profile: Snapshot, raw dict (validated into a snapshot), or None

    Returns:
        NormalizedProfile with defaults applied
    """
    if profile is None:
        profile = ProfileSnapshot()
    elif isinstance(profile, dict):
        profile = ProfileSnapshot.model_validate(profile)

    return NormalizedProfile(
        goal=profile.goal or DEFAULT_GOAL,
        experience_level=profile.experience_level or DEFAULT_EXPERIENCE_LEVEL,
        body_weight_kg=float(profile.body_weight_kg or DEFAULT_BODY_WEIGHT_KG),
        diet=profile.diet or DEFAULT_DIET,
        injuries=tuple(sorted(set(profile.injuries or []))),
    )
