"""Nutrition value objects and rounding helpers."""

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)


def round_tenth(value: float) -> float:
    """Round to one decimal place with half-up semantics."""
    return math.floor(value * 10 + 0.5) / 10


@dataclass(frozen=True)
class DailyTotals:
    """Summed calories and macros for one calendar day."""

    calories: int
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class MacroProgress:
    """Consumed grams of a macro against its daily target."""

    consumed: float
    target: float
    percent: float


@dataclass(frozen=True)
class MacroBreakdown:
    """Progress for each macro."""

    protein: MacroProgress
    carbs: MacroProgress
    fat: MacroProgress
