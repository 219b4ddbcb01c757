"""Nutrition rules - daily kcal and macro targets from a profile.

Formula:
- kcal = body weight x goal multiplier (cut 28, maintain 30, gain 33), clamped
- protein = body weight x 2.0 g/kg (2.2 g/kg for vegan diets)
- calories left after protein split 55% carbs (4 kcal/g) / 45% fat (9 kcal/g)

The preview generator and nutrition_from_profile both call compute_nutrition,
so their numbers are identical for the same profile.
"""

from loguru import logger

from mentor.plans.profile import Goal, NormalizedProfile, ProfileSnapshot, normalize_profile
from mentor.plans.safety import clamp_kcal, round_half_up
from mentor.plans.types import NutritionPatch, NutritionSummary, PatchReason

KCAL_PER_KG: dict[Goal, int] = {
    "cut": 28,
    "maintain": 30,
    "gain": 33,
}

PROTEIN_G_PER_KG = 2.0
PROTEIN_G_PER_KG_VEGAN = 2.2

CARB_SHARE = 0.55
FAT_SHARE = 0.45

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARB = 4
KCAL_PER_G_FAT = 9


def protein_per_kg(profile: NormalizedProfile) -> float:
    return PROTEIN_G_PER_KG_VEGAN if profile.is_vegan else PROTEIN_G_PER_KG


def compute_nutrition(profile: NormalizedProfile) -> NutritionSummary:
    """Compute the daily nutrition target for a normalized profile.

    Args:
        profile: Normalized profile

    Returns:
        NutritionSummary with kcal in [MIN_KCAL, MAX_KCAL] and non-negative macros
    """
    kcal = clamp_kcal(profile.body_weight_kg * KCAL_PER_KG[profile.goal])
    protein = round_half_up(profile.body_weight_kg * protein_per_kg(profile))
    kcal_after_protein = max(kcal - protein * KCAL_PER_G_PROTEIN, 0)
    carbs = round_half_up(kcal_after_protein * CARB_SHARE / KCAL_PER_G_CARB)
    fat = round_half_up(kcal_after_protein * FAT_SHARE / KCAL_PER_G_FAT)

    if profile.is_vegan:
        rationale = "Protein set to ~2.2g/kg for plant-based completeness."
    else:
        rationale = "Protein set to ~2.0g/kg; carbs/fat split 55/45 for adherence."

    return NutritionSummary(
        kcal=kcal,
        protein_grams=protein,
        carbs_grams=carbs,
        fat_grams=fat,
        rationale=rationale,
    )


def nutrition_from_profile(profile: ProfileSnapshot | dict | None) -> NutritionPatch:
    """Build a nutrition-only patch from a profile.

    Args:
        profile: Profile snapshot (missing fields use engine defaults)

    Returns:
        NutritionPatch with all four targets and a rationale
    """
    normalized = normalize_profile(profile)
    summary = compute_nutrition(normalized)
    multiplier = KCAL_PER_KG[normalized.goal]

    logger.debug(
        f"Nutrition from profile: goal={normalized.goal}, weight={normalized.body_weight_kg}kg, "
        f"kcal={summary.kcal}, protein={summary.protein_grams}g"
    )

    protein_bullet = (
        "Protein ~2.2 g/kg (plant sources)" if normalized.is_vegan else "Protein ~2.0 g/kg"
    )
    return NutritionPatch(
        kcal=summary.kcal,
        protein_grams=summary.protein_grams,
        carbs_grams=summary.carbs_grams,
        fat_grams=summary.fat_grams,
        reason=PatchReason(
            summary="Macros derived from profile",
            bullets=[
                f"{normalized.goal} goal -> {multiplier} kcal/kg",
                protein_bullet,
                "55/45 carb/fat split for adherence",
            ],
        ),
    )
