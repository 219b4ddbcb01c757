"""Pure application of patches to plan values.

Turns a TrainingPatch / NutritionPatch plus the current plan into the next
plan. Nothing here touches the database; see mentor.plans.materialize for
versioned persistence.
"""

import re
from collections.abc import Callable, Sequence

from loguru import logger

from mentor.plans.safety import clamp_kcal
from mentor.plans.types import NutritionPatch, NutritionSummary, PreviewDay, PreviewExercise, TrainingPatch

_REP_RANGE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")


def shift_reps(reps: str, delta: int) -> str:
    """Shift a rep prescription by delta reps ("8-10", +1 -> "9-11").

    Each bound is floored at 1. Free-text prescriptions ("AMRAP") are kept.
    """
    range_match = _REP_RANGE.match(reps)
    if range_match:
        low, high = (max(1, int(v) + delta) for v in range_match.groups())
        return f"{low}-{high}"
    if reps.strip().isdigit():
        return str(max(1, int(reps) + delta))
    return reps


def _on_day(
    days: list[PreviewDay],
    day: str,
    name: str,
    update: Callable[[PreviewExercise], PreviewExercise],
) -> list[PreviewDay]:
    result = []
    for d in days:
        if d.day != day or not d.exercises:
            result.append(d)
            continue
        exercises = [update(e) if e.name == name else e for e in d.exercises]
        result.append(d.model_copy(update={"exercises": exercises}))
    return result


def apply_training_patch_to_days(days: Sequence[PreviewDay], patch: TrainingPatch) -> list[PreviewDay]:
    """Apply swaps, then volume tweaks, then intensity tweaks.

    Args:
        days: Current training week
        patch: Patch to apply

    Returns:
        New list of days; the input is left untouched
    """
    result = [d.model_copy(deep=True) for d in days]

    for swap in patch.swaps:
        result = _on_day(result, swap.day, swap.from_name, lambda e, s=swap: e.model_copy(update={"name": s.to_name}))

    for tweak in patch.volume_tweaks:

        def _volume(e: PreviewExercise, t=tweak) -> PreviewExercise:
            update: dict = {"sets": max(1, e.sets + (t.delta_sets or 0))}
            if t.delta_reps:
                update["reps"] = shift_reps(e.reps, t.delta_reps)
            return e.model_copy(update=update)

        result = _on_day(result, tweak.day, tweak.exercise_name, _volume)

    for tweak in patch.intensity_tweaks:
        result = _on_day(
            result,
            tweak.day,
            tweak.exercise_name,
            lambda e, t=tweak: e.model_copy(update={"rpe": t.new_rpe or e.rpe}),
        )

    if patch.target_days_per_week is not None:
        logger.info(f"Frequency target {patch.target_days_per_week}/week recorded; day layout left unchanged")

    return result


def apply_nutrition_patch_to_summary(current: NutritionSummary | None, patch: NutritionPatch) -> NutritionSummary:
    """Overlay a nutrition patch on the current targets.

    Fields missing from the patch keep their current value (0 when there is
    no current summary). kcal is always clamped to the safety range.
    """
    base = current or NutritionSummary(kcal=0, protein_grams=0, carbs_grams=0, fat_grams=0)
    kcal = patch.kcal if patch.kcal is not None else base.kcal
    return NutritionSummary(
        kcal=clamp_kcal(kcal),
        protein_grams=max(0, patch.protein_grams if patch.protein_grams is not None else base.protein_grams),
        carbs_grams=max(0, patch.carbs_grams if patch.carbs_grams is not None else base.carbs_grams),
        fat_grams=max(0, patch.fat_grams if patch.fat_grams is not None else base.fat_grams),
        rationale=patch.reason.summary,
    )
