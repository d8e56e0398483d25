"""Food candidates and logged entries."""

import math
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from calorie_tracker.domain.nutrition import round_half_up, round_tenth

# Later instants cannot be turned into a local date on every platform.
MAX_TIMESTAMP_MS = int(datetime(9999, 1, 1, tzinfo=UTC).timestamp() * 1000)


class FoodCandidate(BaseModel):
    """A food proposed for logging, recognized from a photo or typed in.

    Calories are rounded to whole kcal and macros to one decimal place on
    construction. Missing values default to zero so completeness can be
    checked separately.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    calories: int = Field(default=0, ge=0)
    protein: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    carbs: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    fat: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    @field_validator("calories", mode="before")
    @classmethod
    def _round_calories(cls, value: object) -> object:
        if isinstance(value, float):
            return round_half_up(_finite(value))
        return value

    @field_validator("protein", "carbs", "fat", mode="before")
    @classmethod
    def _round_macro(cls, value: object) -> object:
        if isinstance(value, int | float) and not isinstance(value, bool):
            return round_tenth(_finite(float(value)))
        return value

    @property
    def is_complete(self) -> bool:
        """Return True when the name and every nutrient are present."""
        return bool(
            self.name.strip()
            and self.calories
            and self.protein
            and self.carbs
            and self.fat
        )


class FoodEntry(BaseModel):
    """An immutable logged food. The timestamp doubles as its identifier."""

    model_config = ConfigDict(frozen=True)

    name: str
    calories: int = Field(ge=0)
    protein: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    fat: float = Field(ge=0, allow_inf_nan=False)
    timestamp: int = Field(ge=0, le=MAX_TIMESTAMP_MS)

    @classmethod
    def from_candidate(cls, candidate: FoodCandidate, timestamp: int) -> "FoodEntry":
        """Create an entry stamped with a creation instant in milliseconds."""
        return cls(
            name=candidate.name,
            calories=candidate.calories,
            protein=candidate.protein,
            carbs=candidate.carbs,
            fat=candidate.fat,
            timestamp=timestamp,
        )


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise ValueError("must be a finite number")
    return value
