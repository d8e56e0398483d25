"""Daily calorie goal from the Mifflin-St Jeor equation."""

from calorie_tracker.domain.nutrition import round_half_up
from calorie_tracker.domain.profile import ActivityLevel, Gender, Goal, Profile

ACTIVITY_FACTORS: dict[ActivityLevel, float] = {
    ActivityLevel.LOW: 1.2,
    ActivityLevel.MEDIUM: 1.55,
    ActivityLevel.HIGH: 1.9,
}

GOAL_FACTORS: dict[Goal, float] = {
    Goal.LOSE: 0.8,
    Goal.GAIN: 1.2,
}

_SEX_OFFSETS: dict[Gender, float] = {
    Gender.MALE: 5,
    Gender.FEMALE: -161,
}


def basal_metabolic_rate(profile: Profile) -> float:
    """Return the resting energy expenditure in kcal."""
    return (
        10 * profile.weight
        + 6.25 * profile.height
        - 5 * profile.age
        + _SEX_OFFSETS[profile.gender]
    )


def compute_daily_goal(profile: Profile) -> int:
    """Return the daily calorie target for a profile.

    The activity-scaled BMR is rounded first and the goal adjustment is
    applied to that rounded value, then rounded again.
    """
    target = round_half_up(
        basal_metabolic_rate(profile) * ACTIVITY_FACTORS[profile.activity_level]
    )
    factor = GOAL_FACTORS.get(profile.goal)
    if factor is None:
        return target
    return round_half_up(target * factor)
