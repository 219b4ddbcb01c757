"""Tests for training patch rules.

Tests enforce the safety bounds:
- Progression adds at most one set per main lift
- Deload reduces sets and never takes RPE below 5
- Swaps resolve to a day that exists in the plan
- Injury substitutions return None when there is nothing to do
"""

from mentor.plans.preview import generate_deterministic_preview
from mentor.plans.training import (
    apply_injury_substitutions,
    deload_delta,
    nearest_valid_day,
    parse_rpe,
    patch_deload,
    patch_progression,
    patch_set_days_per_week,
    patch_swap_exercise,
    progression_delta,
)
from mentor.plans.types import ExerciseSwap, PreviewDay, PreviewExercise


def test_swap_on_existing_day(three_day_plan):
    """Test that a swap on an existing day targets that day."""
    patch = patch_swap_exercise(three_day_plan, "Wed", "Bench Press", "Dumbbell Press")

    assert patch.swaps == [ExerciseSwap(day="Wed", from_name="Bench Press", to_name="Dumbbell Press")]
    assert "No change in total volume" in patch.reason.bullets
    assert patch.reason.summary


def test_swap_falls_back_to_first_training_day(three_day_plan):
    """Test that a missing day resolves to the first day with exercises."""
    patch = patch_swap_exercise(three_day_plan, "Sun", "X", "Y")

    assert patch.swaps[0].day == "Mon"


def test_swap_skips_rest_days_when_falling_back():
    """Test fallback ignores leading days without exercises."""
    plan = [
        PreviewDay(day="Mon", focus="Rest"),
        PreviewDay(day="Tue", focus="Full", exercises=[PreviewExercise(name="Bench Press", sets=3, reps="6-8")]),
    ]

    assert nearest_valid_day("Sun", plan) == "Tue"


def test_swap_falls_back_to_first_day_without_any_exercises():
    """Test fallback to the first day when no day has exercises."""
    plan = [PreviewDay(day="Mon", focus="Rest"), PreviewDay(day="Tue", focus="Cardio")]

    assert nearest_valid_day("Sun", plan) == "Mon"


def test_set_days_per_week_is_declarative(three_day_plan):
    """Test that the frequency patch only states the target."""
    patch = patch_set_days_per_week(three_day_plan, 2)

    assert patch.target_days_per_week == 2
    assert patch.swaps == []
    assert patch.volume_tweaks == []
    assert "2/week" in patch.reason.summary


def test_progression_adds_one_set_to_main_lift(three_day_plan):
    """Test 3 sets -> +1 (20% rounds down to 0, floored to 1, capped at 1)."""
    patch = patch_progression(three_day_plan)

    assert len(patch.volume_tweaks) == 3
    assert [t.exercise_name for t in patch.volume_tweaks] == ["Back Squat", "Bench Press", "Lat Pulldown"]
    assert all(t.delta_sets == 1 for t in patch.volume_tweaks)


def test_progression_never_exceeds_one_set():
    """Test the +1 cap holds for large set counts."""
    for sets in range(1, 30):
        assert progression_delta(sets) == 1


def test_progression_only_touches_training_days():
    """Test that rest/cardio days produce no tweaks."""
    week = generate_deterministic_preview("user-1", {"experience_level": "beginner"}).training_week

    patch = patch_progression(week)

    assert [t.day for t in patch.volume_tweaks] == ["Mon", "Wed", "Fri"]


def test_deload_reduces_sets_and_rpe(three_day_plan):
    """Test deload marks the patch and lowers sets and RPE."""
    patch = patch_deload(three_day_plan)

    assert patch.deload is True
    assert all(t.delta_sets == -1 for t in patch.volume_tweaks)
    assert [t.new_rpe for t in patch.intensity_tweaks] == ["RPE 6", "RPE 6", "RPE 6"]


def test_deload_never_increases_volume():
    """Test deload always removes at least one set."""
    for sets in range(1, 30):
        assert deload_delta(sets) <= -1
    assert deload_delta(10) == -3
    assert deload_delta(5) == -2


def test_deload_rpe_floor():
    """Test RPE 5 stays at RPE 5."""
    plan = [PreviewDay(day="Mon", focus="Full", exercises=[PreviewExercise(name="Squat", sets=3, reps="5", rpe="RPE 5")])]

    patch = patch_deload(plan)

    assert patch.intensity_tweaks[0].new_rpe == "RPE 5"


def test_deload_skips_rpe_when_absent():
    """Test exercises without RPE get a volume tweak only."""
    plan = [PreviewDay(day="Mon", focus="Full", exercises=[PreviewExercise(name="Plank", sets=2, reps="30")])]

    patch = patch_deload(plan)

    assert len(patch.volume_tweaks) == 1
    assert patch.intensity_tweaks == []


def test_parse_rpe():
    """Test the leading number of an RPE string is used."""
    assert parse_rpe("7-8") == 7
    assert parse_rpe("RPE 6") == 6
    assert parse_rpe("8") == 8
    assert parse_rpe("hard") == 7


def test_injury_substitutions_none_without_injuries(three_day_plan):
    """Test that no injuries means no patch."""
    assert apply_injury_substitutions(three_day_plan, []) is None
    assert apply_injury_substitutions(three_day_plan, None) is None


def test_injury_substitutions_none_when_nothing_matches(three_day_plan):
    """Test that injuries without matching rules return None, not an empty patch."""
    assert apply_injury_substitutions(three_day_plan, ["shoulder"]) is None


def test_injury_substitutions_knee(three_day_plan):
    """Test knee injury swaps Back Squat and Lunge."""
    plan = three_day_plan + [
        PreviewDay(day="Sat", focus="Legs", exercises=[PreviewExercise(name="Lunge", sets=3, reps="10")]),
    ]

    patch = apply_injury_substitutions(plan, ["knee"])

    assert patch is not None
    assert patch.swaps == [
        ExerciseSwap(day="Mon", from_name="Back Squat", to_name="Leg Press"),
        ExerciseSwap(day="Sat", from_name="Lunge", to_name="Step-ups"),
    ]
    assert patch.reason.bullets
