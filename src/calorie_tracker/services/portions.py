"""Portion advice for foods that would overshoot the daily goal."""

import logging
from dataclasses import dataclass

from calorie_tracker.domain.food import FoodCandidate
from calorie_tracker.domain.nutrition import DailyTotals, round_half_up, round_tenth
from calorie_tracker.domain.portions import (
    Decision,
    ExcessWarning,
    LimitReached,
    NormalAdd,
    PerfectAdjustedFit,
    PerfectFit,
)

PERFECT_FIT_TOLERANCE_KCAL = 5
# Smallest one-decimal step, for both portion percent and macro grams.
MIN_PORTION = 0.1

_logger = logging.getLogger(__name__)


@dataclass
class PortionAdvisor:
    """Decides how a candidate food should be logged against the budget."""

    tolerance_kcal: int = PERFECT_FIT_TOLERANCE_KCAL

    def evaluate(
        self, candidate: FoodCandidate, totals: DailyTotals, daily_goal: int
    ) -> Decision | None:
        """Return the decision for a candidate, or None if it is incomplete."""
        if not candidate.is_complete:
            _logger.warning(
                "Dropping incomplete food candidate: %s", candidate.name or "<unnamed>"
            )
            return None

        consumed = totals.calories
        remaining = daily_goal - consumed
        if remaining <= 0:
            return LimitReached(
                candidate=candidate,
                remaining=remaining,
                exceed_percent=_percent(
                    consumed + candidate.calories - daily_goal, daily_goal
                ),
            )
        if abs(candidate.calories - remaining) <= self.tolerance_kcal:
            return PerfectFit(candidate=candidate, remaining=remaining)
        if candidate.calories > remaining:
            portion, suggested = scale_candidate(candidate, remaining)
            if abs(suggested.calories - remaining) <= self.tolerance_kcal:
                return PerfectAdjustedFit(
                    candidate=candidate,
                    suggested=suggested,
                    portion_percent=portion,
                    remaining=remaining,
                )
            return ExcessWarning(
                candidate=candidate,
                suggested=suggested,
                portion_percent=portion,
                remaining=remaining,
            )
        return NormalAdd(
            candidate=candidate,
            remaining=remaining,
            goal_percent=_percent(consumed + candidate.calories, daily_goal),
        )


def scale_candidate(
    candidate: FoodCandidate, remaining: int
) -> tuple[float, FoodCandidate]:
    """Scale a candidate down so its calories match the remaining budget.

    Returns the portion as a percentage rounded to one decimal place and the
    scaled candidate, whose nutrients all use that same portion. Non-zero
    values never round down to zero, so the scaled candidate stays complete
    and can be logged.
    """
    portion = max(round_tenth(remaining / candidate.calories * 100), MIN_PORTION)
    ratio = portion / 100
    scaled = FoodCandidate(
        name=f"{portion:.1f}% of {candidate.name}",
        calories=max(round_half_up(candidate.calories * ratio), 1),
        protein=_scale_macro(candidate.protein, ratio),
        carbs=_scale_macro(candidate.carbs, ratio),
        fat=_scale_macro(candidate.fat, ratio),
    )
    return portion, scaled


def _scale_macro(grams: float, ratio: float) -> float:
    if not grams:
        return 0.0
    return max(round_tenth(grams * ratio), MIN_PORTION)


def _percent(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100
