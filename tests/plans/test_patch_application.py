"""Tests for applying patches to plan values (no database)."""

from mentor.plans.apply import apply_nutrition_patch_to_summary, apply_training_patch_to_days, shift_reps
from mentor.plans.training import patch_deload, patch_progression, patch_set_days_per_week, patch_swap_exercise
from mentor.plans.types import (
    NutritionPatch,
    NutritionSummary,
    PatchReason,
    PreviewDay,
    PreviewExercise,
    TrainingPatch,
    VolumeTweak,
)


def test_swap_renames_only_on_target_day(three_day_plan):
    """Test that a swap renames the exercise on one day and leaves the input alone."""
    days = apply_training_patch_to_days(three_day_plan, patch_swap_exercise(three_day_plan, "Mon", "Back Squat", "Leg Press"))

    assert days[0].exercises[0].name == "Leg Press"
    assert days[0].exercises[0].sets == 3
    assert three_day_plan[0].exercises[0].name == "Back Squat"


def test_progression_then_deload(three_day_plan):
    """Test progression adds a set and deload removes sets and lowers RPE."""
    progressed = apply_training_patch_to_days(three_day_plan, patch_progression(three_day_plan))
    assert [d.exercises[0].sets for d in progressed] == [4, 4, 4]

    deloaded = apply_training_patch_to_days(progressed, patch_deload(progressed))
    assert [d.exercises[0].sets for d in deloaded] == [3, 3, 3]
    assert [d.exercises[0].rpe for d in deloaded] == ["RPE 6", "RPE 6", "RPE 6"]


def test_sets_never_drop_below_one():
    """Test that volume tweaks floor sets at 1."""
    days = [PreviewDay(day="Mon", focus="Full", exercises=[PreviewExercise(name="Squat", sets=1, reps="5")])]
    patch = TrainingPatch(
        volume_tweaks=[VolumeTweak(day="Mon", exercise_name="Squat", delta_sets=-3)],
        reason=PatchReason(summary="test"),
    )

    assert apply_training_patch_to_days(days, patch)[0].exercises[0].sets == 1


def test_delta_reps_shift_range():
    """Test rep deltas shift both ends of the range."""
    days = [PreviewDay(day="Mon", focus="Full", exercises=[PreviewExercise(name="Squat", sets=3, reps="8-10")])]
    patch = TrainingPatch(
        volume_tweaks=[VolumeTweak(day="Mon", exercise_name="Squat", delta_reps=2)],
        reason=PatchReason(summary="test"),
    )

    exercise = apply_training_patch_to_days(days, patch)[0].exercises[0]

    assert exercise.reps == "10-12"
    assert exercise.sets == 3


def test_shift_reps():
    """Test rep text handling."""
    assert shift_reps("8-10", 1) == "9-11"
    assert shift_reps("1-3", -2) == "1-1"
    assert shift_reps("5", -1) == "4"
    assert shift_reps("AMRAP", 2) == "AMRAP"


def test_days_per_week_leaves_layout(three_day_plan):
    """Test the frequency target does not move days around."""
    days = apply_training_patch_to_days(three_day_plan, patch_set_days_per_week(three_day_plan, 5))

    assert days == three_day_plan


def test_nutrition_overlay_keeps_missing_fields():
    """Test fields absent from the patch keep their current values."""
    current = NutritionSummary(kcal=2200, protein_grams=160, carbs_grams=250, fat_grams=70)
    patch = NutritionPatch(kcal=2000, reason=PatchReason(summary="Calories set to 2000"))

    result = apply_nutrition_patch_to_summary(current, patch)

    assert (result.kcal, result.protein_grams, result.carbs_grams, result.fat_grams) == (2000, 160, 250, 70)
    assert result.rationale == "Calories set to 2000"


def test_nutrition_overlay_clamps_kcal():
    """Test kcal from a patch is clamped into the safety range."""
    patch = NutritionPatch(kcal=600, reason=PatchReason(summary="too low"))

    assert apply_nutrition_patch_to_summary(None, patch).kcal == 1200
