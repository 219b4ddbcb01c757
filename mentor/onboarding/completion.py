"""Profile completion tracking.

Six fields count towards completion: goal, experience level, body weight,
diet, days per week, and the injury answer (an empty list counts as answered).
"""

from mentor.db.models import Profile
from mentor.plans.safety import round_half_up

TRACKED_FIELD_COUNT = 6


def collected_fields(profile: Profile | None) -> list[str]:
    """List which tracked fields the profile has filled in."""
    if profile is None:
        return []

    collected = []
    if profile.goal:
        collected.append("goal")
    if profile.experience_level:
        collected.append("experience_level")
    if profile.body_weight_kg:
        collected.append("body_weight_kg")
    if profile.diet:
        collected.append("diet")
    if (profile.schedule or {}).get("days_per_week"):
        collected.append("days_per_week")
    if isinstance(profile.injuries, list):
        collected.append("injuries")
    return collected


def collected_percent(profile: Profile | None) -> int:
    """Completion percentage (0-100) of the tracked profile fields."""
    return round_half_up(len(collected_fields(profile)) / TRACKED_FIELD_COUNT * 100)
