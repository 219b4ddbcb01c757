"""Tests for profile completion tracking."""

from mentor.db.models import Profile
from mentor.onboarding.completion import collected_fields, collected_percent


def test_empty_profile():
    """Test nothing collected yields 0%."""
    assert collected_percent(None) == 0
    assert collected_percent(Profile(user_id="u1")) == 0


def test_five_of_six_crosses_default_threshold():
    """Test five fields -> 83%."""
    profile = Profile(
        user_id="u1",
        goal="cut",
        experience_level="beginner",
        body_weight_kg=80,
        diet="vegan",
        schedule={"days_per_week": 3},
    )

    assert collected_percent(profile) == 83


def test_empty_injury_list_counts_as_answered():
    """Test an empty injuries list counts, a missing one does not."""
    assert collected_fields(Profile(user_id="u1", injuries=[])) == ["injuries"]
    assert collected_fields(Profile(user_id="u1", injuries=None)) == []


def test_zero_body_weight_is_missing():
    """Test a body weight of 0 is not counted."""
    assert collected_fields(Profile(user_id="u1", body_weight_kg=0)) == []


def test_all_fields():
    """Test all six fields -> 100%."""
    profile = Profile(
        user_id="u1",
        goal="gain",
        experience_level="advanced",
        body_weight_kg=90,
        diet="regular",
        schedule={"days_per_week": 5, "preferred_days": ["Mon"]},
        injuries=["knee"],
    )

    assert collected_percent(profile) == 100
