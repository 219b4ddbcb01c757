"""Tests for nutrition rules.

The standalone nutrition rule and the preview generator share one formula;
their numbers must always agree.
"""

import pytest

from mentor.plans.nutrition import nutrition_from_profile
from mentor.plans.preview import generate_deterministic_preview
from mentor.plans.safety import clamp_kcal, round_half_up


@pytest.mark.parametrize(
    "profile",
    [
        {},
        {"goal": "cut", "body_weight_kg": 80, "diet": "vegan"},
        {"goal": "gain", "body_weight_kg": 62.5},
        {"goal": "maintain", "body_weight_kg": 95, "diet": "keto"},
        {"goal": "gain", "body_weight_kg": 1},
        {"goal": "cut", "body_weight_kg": 1000},
    ],
)
def test_matches_preview_nutrition(profile):
    """Test nutrition_from_profile equals the preview's nutrition block."""
    patch = nutrition_from_profile(profile)
    summary = generate_deterministic_preview("user-1", profile).nutrition

    assert (patch.kcal, patch.protein_grams, patch.carbs_grams, patch.fat_grams) == (
        summary.kcal,
        summary.protein_grams,
        summary.carbs_grams,
        summary.fat_grams,
    )


def test_defaults():
    """Test the 70kg maintain default."""
    patch = nutrition_from_profile(None)

    assert patch.kcal == 2100
    assert patch.protein_grams == 140
    # (2100 - 560) * 0.55 / 4 = 211.75, (2100 - 560) * 0.45 / 9 = 77
    assert patch.carbs_grams == 212
    assert patch.fat_grams == 77


def test_reason_is_populated():
    """Test the patch explains itself."""
    patch = nutrition_from_profile({"goal": "cut", "diet": "vegan"})

    assert patch.reason.summary
    assert patch.reason.bullets[0] == "cut goal -> 28 kcal/kg"
    assert "2.2" in patch.reason.bullets[1]


def test_clamp_kcal():
    """Test clamp bounds and rounding."""
    assert clamp_kcal(33) == 1200
    assert clamp_kcal(28000) == 5000
    assert clamp_kcal(2240.5) == 2241


def test_round_half_up():
    """Test halves round up rather than to even."""
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
