"""Deterministic plan preview generation.

Turns a (possibly partial) profile into one training week and a nutrition
target. The result is a pure function of its inputs:
- Same user id + same normalized profile -> identical days and hash
- Injury order never affects the output
- No I/O; persistence is the caller's job
"""

import hashlib
import json

from loguru import logger

from mentor.plans.nutrition import compute_nutrition
from mentor.plans.profile import ExperienceLevel, Injury, NormalizedProfile, ProfileSnapshot, normalize_profile
from mentor.plans.substitutions import match_by_pattern
from mentor.plans.types import DAY_NAMES, NutritionSummary, PlanPreview, PreviewDay, PreviewExercise

BEGINNER_STRENGTH_DAYS = frozenset({0, 2, 4})
BEGINNER_CARDIO_DAYS = frozenset({1, 5})

FULL_BODY_FOCUS = "Full Body"
CARDIO_FOCUS = "Cardio (Zone 2) 25–35min"
REST_FOCUS = "Rest / Mobility 10–15min"
UPPER_FOCUS = "Upper"
LOWER_FOCUS = "Lower"


def base_exercises(experience_level: ExperienceLevel) -> list[PreviewExercise]:
    """Return the strength session template for an experience level."""
    exercises = [
        PreviewExercise(name="Back Squat", sets=3, reps="8-10", rpe="7-8"),
        PreviewExercise(name="Bench Press", sets=3, reps="6-8", rpe="7-8"),
        PreviewExercise(name="Lat Pulldown", sets=3, reps="10-12", rpe="7-8"),
    ]
    if experience_level == "intermediate":
        exercises.append(PreviewExercise(name="Romanian Deadlift", sets=3, reps="6-8", rpe="7-8"))
    elif experience_level == "advanced":
        exercises.append(PreviewExercise(name="Romanian Deadlift", sets=4, reps="5-7", rpe="8"))
    return exercises


def substitute_for_injuries(exercise: PreviewExercise, injuries: tuple[Injury, ...]) -> PreviewExercise:
    """Swap an exercise for a safer alternative when an injury calls for it."""
    rule = match_by_pattern(exercise.name, injuries)
    if rule is None:
        return exercise
    return exercise.model_copy(update={"name": rule.replacement, "rationale": rule.rationale})


def _strength_session(profile: NormalizedProfile) -> list[PreviewExercise]:
    return [substitute_for_injuries(e, profile.injuries) for e in base_exercises(profile.experience_level)]


def build_training_week(profile: NormalizedProfile) -> list[PreviewDay]:
    """Build the Mon -> Sun training week.

    Beginners train full body Mon/Wed/Fri with Zone 2 cardio Tue/Sat.
    Intermediate and advanced lifters get a strength session every day,
    alternating Upper (even index) and Lower (odd index).

    Args:
        profile: Normalized profile

    Returns:
        Exactly seven PreviewDay entries
    """
    days: list[PreviewDay] = []
    for index, day_name in enumerate(DAY_NAMES):
        if profile.experience_level == "beginner":
            if index in BEGINNER_STRENGTH_DAYS:
                days.append(PreviewDay(day=day_name, focus=FULL_BODY_FOCUS, exercises=_strength_session(profile)))
            elif index in BEGINNER_CARDIO_DAYS:
                days.append(PreviewDay(day=day_name, focus=CARDIO_FOCUS))
            else:
                days.append(PreviewDay(day=day_name, focus=REST_FOCUS))
            continue

        focus = UPPER_FOCUS if index % 2 == 0 else LOWER_FOCUS
        days.append(PreviewDay(day=day_name, focus=focus, exercises=_strength_session(profile)))
    return days


def compute_preview_hash(
    user_id: str,
    profile: NormalizedProfile,
    days: list[PreviewDay],
    nutrition: NutritionSummary,
) -> str:
    """Hash the canonical generation inputs with SHA-256.

    Keys are sorted and separators fixed, so the digest depends only on the
    logical content.
    """
    payload = {
        "user_id": user_id,
        "experience_level": profile.experience_level,
        "injuries": [str(injury) for injury in profile.injuries],
        "goal": profile.goal,
        "diet": profile.diet,
        "body_weight_kg": profile.body_weight_kg,
        "days": [day.model_dump(exclude_none=True) for day in days],
        "nutrition": nutrition.model_dump(exclude_none=True),
    }
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def generate_deterministic_preview(user_id: str, profile: ProfileSnapshot | dict | None) -> PlanPreview:
    """Generate a plan preview from a profile snapshot.

    Args:
        user_id: Owning user id
        profile: Profile snapshot; missing fields fall back to engine defaults

    Returns:
        PlanPreview (not persisted)
    """
    normalized = normalize_profile(profile)
    days = build_training_week(normalized)
    nutrition = compute_nutrition(normalized)
    preview_hash = compute_preview_hash(user_id, normalized, days, nutrition)

    logger.debug(
        f"Generated preview for user_id={user_id}: level={normalized.experience_level}, "
        f"goal={normalized.goal}, injuries={list(normalized.injuries)}, hash={preview_hash[:12]}"
    )

    return PlanPreview(user_id=user_id, training_week=days, nutrition=nutrition, hash=preview_hash)
