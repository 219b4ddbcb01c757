"""Training patch rules.

Each rule reads the current week and returns a TrainingPatch describing a
bounded change. Rules never mutate their input and never persist anything.

Bounds (see mentor.plans.safety):
- Progression adds at most one set to the main lift of each training day
- Deload removes ~30% of sets (at least one) and drops RPE by 1, never below 5
- Swaps keep total volume unchanged

Callers must pass at least one day to patch_swap_exercise; an empty week
has no meaningful target day.
"""

import re
from collections.abc import Iterable, Sequence

from loguru import logger

from mentor.plans.profile import Injury
from mentor.plans.safety import (
    DEFAULT_RPE,
    DELOAD_SET_REDUCTION_PCT,
    MAX_SET_JUMP_ABS,
    MAX_SET_JUMP_PCT,
    MIN_DELOAD_RPE,
    round_half_up,
)
from mentor.plans.substitutions import match_exact
from mentor.plans.types import (
    ExerciseSwap,
    IntensityTweak,
    PatchReason,
    PreviewDay,
    TrainingPatch,
    VolumeTweak,
)

_RPE_NUMBER = re.compile(r"\d+")


def nearest_valid_day(requested: str, days: Sequence[PreviewDay]) -> str:
    """Resolve a requested day label against the plan.

    Falls back to the first day with exercises, then to the first day.
    """
    if any(d.day == requested for d in days):
        return requested
    for d in days:
        if d.exercises:
            return d.day
    return days[0].day if days else requested


def parse_rpe(rpe: str) -> int:
    """Read the leading number of an RPE string ("7-8" -> 7, "RPE 6" -> 6)."""
    match = _RPE_NUMBER.search(rpe)
    return int(match.group()) if match else DEFAULT_RPE


def patch_set_days_per_week(current: Sequence[PreviewDay], days_per_week: int) -> TrainingPatch:
    """Set a weekly training frequency target.

    Only the target is recorded; which days become rest days is decided by
    whoever realizes the plan.
    """
    training_days = sum(1 for d in current if d.exercises)
    logger.debug(f"Days/week patch: current={training_days}, target={days_per_week}")
    return TrainingPatch(
        target_days_per_week=days_per_week,
        swaps=[],
        reason=PatchReason(
            summary=f"Training frequency set to {days_per_week}/week",
            bullets=["Existing sessions kept; remaining days become rest/mobility"],
        ),
    )


def patch_swap_exercise(current: Sequence[PreviewDay], day: str, from_name: str, to_name: str) -> TrainingPatch:
    """Swap one exercise for another on a single day."""
    target_day = nearest_valid_day(day, current)
    if target_day != day:
        logger.debug(f"Swap day '{day}' not in plan, resolved to '{target_day}'")
    return TrainingPatch(
        swaps=[ExerciseSwap(day=target_day, from_name=from_name, to_name=to_name)],
        reason=PatchReason(
            summary=f"Swapped {from_name} -> {to_name} on {target_day}",
            bullets=["Injury/preference-friendly swap", "No change in total volume"],
        ),
    )


def progression_delta(sets: int) -> int:
    """Sets to add to a main lift: 20% of current sets, at least 1, at most 1."""
    max_add = max(1, int(sets * MAX_SET_JUMP_PCT))
    return min(MAX_SET_JUMP_ABS, max_add)


def patch_progression(current: Sequence[PreviewDay]) -> TrainingPatch:
    """Propose a small set increase on the first exercise of each training day."""
    volume_tweaks = []
    for d in current:
        if not d.exercises:
            continue
        main = d.exercises[0]
        volume_tweaks.append(
            VolumeTweak(day=d.day, exercise_name=main.name, delta_sets=progression_delta(main.sets))
        )

    return TrainingPatch(
        volume_tweaks=volume_tweaks,
        reason=PatchReason(
            summary="Small, controlled progression",
            bullets=["<=20% volume increase on main lifts", "At most +1 set per lift"],
        ),
    )


def deload_delta(sets: int) -> int:
    """Sets to remove in a deload: ~30% of current sets, at least 1."""
    return -max(1, round_half_up(sets * DELOAD_SET_REDUCTION_PCT))


def patch_deload(current: Sequence[PreviewDay]) -> TrainingPatch:
    """Build a deload week: fewer sets everywhere and RPE lowered by one."""
    volume_tweaks = []
    intensity_tweaks = []
    for d in current:
        for exercise in d.exercises or []:
            volume_tweaks.append(
                VolumeTweak(day=d.day, exercise_name=exercise.name, delta_sets=deload_delta(exercise.sets))
            )
            if exercise.rpe:
                new_rpe = max(MIN_DELOAD_RPE, parse_rpe(exercise.rpe) - 1)
                intensity_tweaks.append(IntensityTweak(day=d.day, exercise_name=exercise.name, new_rpe=f"RPE {new_rpe}"))

    return TrainingPatch(
        deload=True,
        volume_tweaks=volume_tweaks,
        intensity_tweaks=intensity_tweaks,
        reason=PatchReason(summary="Deload week", bullets=["~30% lower volume", "RPE -1 for recovery"]),
    )


def apply_injury_substitutions(days: Sequence[PreviewDay], injuries: Iterable[Injury | str] | None) -> TrainingPatch | None:
    """Swap exercises that conflict with reported injuries.

    Returns:
        TrainingPatch with one swap per affected exercise, or None when there
        are no injuries or nothing to substitute
    """
    if not injuries:
        return None

    resolved = [Injury(injury) for injury in injuries]
    swaps = []
    for d in days:
        for exercise in d.exercises or []:
            for injury in resolved:
                rule = match_exact(exercise.name, injury)
                if rule is not None:
                    swaps.append(ExerciseSwap(day=d.day, from_name=exercise.name, to_name=rule.replacement))

    if not swaps:
        return None

    logger.debug(f"Injury substitutions: injuries={[str(i) for i in resolved]}, swaps={len(swaps)}")
    return TrainingPatch(
        swaps=swaps,
        reason=PatchReason(
            summary="Injury adjustment",
            bullets=["Swapped exercises for gentler alternatives"],
        ),
    )
