"""Outcomes of checking a food candidate against the remaining budget."""

from dataclasses import dataclass
from enum import StrEnum

from calorie_tracker.domain.food import FoodCandidate


class DecisionKind(StrEnum):
    """Discriminator for portion decisions."""

    PERFECT_FIT = "perfect_fit"
    PERFECT_ADJUSTED_FIT = "perfect_adjusted_fit"
    EXCESS_WARNING = "excess_warning"
    LIMIT_REACHED = "limit_reached"
    NORMAL_ADD = "normal_add"


@dataclass(frozen=True)
class PerfectFit:
    """The candidate lands within tolerance of the remaining budget."""

    candidate: FoodCandidate
    remaining: int
    kind: DecisionKind = DecisionKind.PERFECT_FIT

    @property
    def options(self) -> list[FoodCandidate]:
        return [self.candidate]


@dataclass(frozen=True)
class PerfectAdjustedFit:
    """A scaled-down portion completes the goal."""

    candidate: FoodCandidate
    suggested: FoodCandidate
    portion_percent: float
    remaining: int
    kind: DecisionKind = DecisionKind.PERFECT_ADJUSTED_FIT

    @property
    def options(self) -> list[FoodCandidate]:
        return [self.suggested]


@dataclass(frozen=True)
class ExcessWarning:
    """The candidate exceeds the budget; offer the scaled or the full portion."""

    candidate: FoodCandidate
    suggested: FoodCandidate
    portion_percent: float
    remaining: int
    kind: DecisionKind = DecisionKind.EXCESS_WARNING

    @property
    def options(self) -> list[FoodCandidate]:
        return [self.suggested, self.candidate]


@dataclass(frozen=True)
class LimitReached:
    """Nothing is left in the budget; no entry is offered."""

    candidate: FoodCandidate
    remaining: int
    exceed_percent: float
    kind: DecisionKind = DecisionKind.LIMIT_REACHED

    @property
    def options(self) -> list[FoodCandidate]:
        return []


@dataclass(frozen=True)
class NormalAdd:
    """The candidate fits with room to spare."""

    candidate: FoodCandidate
    remaining: int
    goal_percent: float
    kind: DecisionKind = DecisionKind.NORMAL_ADD

    @property
    def options(self) -> list[FoodCandidate]:
        return [self.candidate]


Decision = PerfectFit | PerfectAdjustedFit | ExcessWarning | LimitReached | NormalAdd
