"""Plans module - deterministic plan preview and bounded plan patches.

This module provides:
- Preview generation from a profile snapshot (training week + nutrition + hash)
- Training patch rules (swap, frequency, progression, deload, injuries)
- Nutrition rule (macros from profile)
- Numeric safety bounds shared by all rules

All functions here are pure. Versioned persistence lives in
mentor.plans.materialize.
"""

from mentor.plans.nutrition import compute_nutrition, nutrition_from_profile
from mentor.plans.preview import generate_deterministic_preview
from mentor.plans.profile import Injury, NormalizedProfile, ProfileSnapshot, normalize_profile
from mentor.plans.safety import MAX_KCAL, MAX_SET_JUMP_PCT, MIN_KCAL, clamp_kcal
from mentor.plans.training import (
    apply_injury_substitutions,
    patch_deload,
    patch_progression,
    patch_set_days_per_week,
    patch_swap_exercise,
)
from mentor.plans.types import (
    NutritionPatch,
    NutritionSummary,
    PatchReason,
    PlanPreview,
    PreviewDay,
    PreviewExercise,
    TrainingPatch,
)

__all__ = [
    "MAX_KCAL",
    "MAX_SET_JUMP_PCT",
    "MIN_KCAL",
    "Injury",
    "NormalizedProfile",
    "NutritionPatch",
    "NutritionSummary",
    "PatchReason",
    "PlanPreview",
    "PreviewDay",
    "PreviewExercise",
    "ProfileSnapshot",
    "TrainingPatch",
    "apply_injury_substitutions",
    "clamp_kcal",
    "compute_nutrition",
    "generate_deterministic_preview",
    "normalize_profile",
    "nutrition_from_profile",
    "patch_deload",
    "patch_progression",
    "patch_set_days_per_week",
    "patch_swap_exercise",
]
