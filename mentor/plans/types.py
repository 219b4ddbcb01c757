"""Plan preview and patch schemas.

A plan preview is one deterministic week of training plus a nutrition target.
A patch describes a change to a plan; it never is the plan itself:
- Patches are computed by pure rule functions
- Every patch carries a PatchReason (summary + bullets)
- Applying a patch is the service layer's job (see mentor.plans.materialize)
"""

from typing import Literal

from pydantic import BaseModel, Field

DayName = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Fixed Mon -> Sun ordering used by the generator
DAY_NAMES: tuple[DayName, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class PreviewExercise(BaseModel):
    """Single prescribed exercise.

    Attributes:
        name: Exercise name
        sets: Number of working sets (>= 1)
        reps: Rep range as text, e.g. "8-10"
        rpe: Optional RPE prescription, e.g. "7-8" or "RPE 6"
        rationale: Optional explanation of why the exercise was chosen or substituted
    """

    name: str
    sets: int = Field(ge=1)
    reps: str
    rpe: str | None = None
    rationale: str | None = None


class PreviewDay(BaseModel):
    """One day of the training week.

    Rest and cardio days carry no exercises (exercises is None).
    """

    day: str
    focus: str
    exercises: list[PreviewExercise] | None = None


class NutritionSummary(BaseModel):
    kcal: int = Field(ge=0)
    protein_grams: int = Field(ge=0)
    carbs_grams: int = Field(ge=0)
    fat_grams: int = Field(ge=0)
    rationale: str | None = None


class PlanPreview(BaseModel):
    """Deterministic week-long training + nutrition snapshot for one user.

    Attributes:
        user_id: Owning user
        training_week: Exactly seven days, Mon -> Sun
        nutrition: Daily nutrition target
        hash: SHA-256 of the canonical generation inputs
    """

    user_id: str
    training_week: list[PreviewDay]
    nutrition: NutritionSummary
    hash: str


class PatchReason(BaseModel):
    """User-facing explanation attached to every patch."""

    summary: str = Field(min_length=1)
    bullets: list[str] = Field(default_factory=list)

    def as_text(self) -> str:
        """Flatten to a single line: summary, then bullets joined with '; '."""
        if not self.bullets:
            return self.summary
        return f"{self.summary}: {'; '.join(self.bullets)}"


class ExerciseSwap(BaseModel):
    day: str
    from_name: str
    to_name: str


class VolumeTweak(BaseModel):
    day: str
    exercise_name: str
    delta_sets: int | None = None
    delta_reps: int | None = None


class IntensityTweak(BaseModel):
    day: str
    exercise_name: str
    new_rpe: str | None = None


class TrainingPatch(BaseModel):
    """Described, not-yet-applied change to a training week."""

    target_days_per_week: int | None = None
    swaps: list[ExerciseSwap] = Field(default_factory=list)
    volume_tweaks: list[VolumeTweak] = Field(default_factory=list)
    intensity_tweaks: list[IntensityTweak] = Field(default_factory=list)
    deload: bool | None = None
    reason: PatchReason


class NutritionPatch(BaseModel):
    """Described, not-yet-applied change to nutrition targets."""

    kcal: int | None = None
    protein_grams: int | None = None
    carbs_grams: int | None = None
    fat_grams: int | None = None
    reason: PatchReason
