"""Injury substitution table.

Each row maps (injury, canonical exercise) to a replacement exercise with a
user-facing rationale. The table is deliberately small: only knee entries
exist. Other Injury values have no rows and therefore no effect until
substitutions for them are agreed with coaching staff.
"""

import re
from dataclasses import dataclass

from mentor.plans.profile import Injury


@dataclass(frozen=True)
class InjurySubstitution:
    """One substitution rule.

    Attributes:
        injury: Injury the rule applies to
        exercise: Canonical exercise name matched exactly by patch rules
        pattern: Case-insensitive pattern matched by the preview generator
        replacement: Exercise to use instead
        rationale: Why the replacement is safer
    """

    injury: Injury
    exercise: str
    pattern: re.Pattern[str]
    replacement: str
    rationale: str


INJURY_SUBSTITUTIONS: tuple[InjurySubstitution, ...] = (
    InjurySubstitution(
        injury=Injury.KNEE,
        exercise="Back Squat",
        pattern=re.compile(r"squat", re.IGNORECASE),
        replacement="Leg Press",
        rationale="Knee-friendly swap for Squat",
    ),
    InjurySubstitution(
        injury=Injury.KNEE,
        exercise="Lunge",
        pattern=re.compile(r"lunge", re.IGNORECASE),
        replacement="Step-ups",
        rationale="Reduced knee shear vs Lunges",
    ),
)


def rules_for(injury: Injury) -> tuple[InjurySubstitution, ...]:
    return tuple(rule for rule in INJURY_SUBSTITUTIONS if rule.injury == injury)


def match_by_pattern(exercise_name: str, injuries: tuple[Injury, ...]) -> InjurySubstitution | None:
    """Find the first rule whose pattern matches the exercise name.

    Rules are checked in table order, so "squat" wins over "lunge" for a
    name that contains both.
    """
    for rule in INJURY_SUBSTITUTIONS:
        if rule.injury in injuries and rule.pattern.search(exercise_name):
            return rule
    return None


def match_exact(exercise_name: str, injury: Injury) -> InjurySubstitution | None:
    """Find the rule for an injury whose canonical exercise equals the name."""
    for rule in rules_for(injury):
        if rule.exercise == exercise_name:
            return rule
    return None
