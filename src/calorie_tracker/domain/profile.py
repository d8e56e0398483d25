"""User profile collected during onboarding."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Gender(StrEnum):
    """Biological sex used by the BMR equation."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Weekly activity bracket."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Goal(StrEnum):
    """Weight goal driving the calorie adjustment."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class Profile(BaseModel):
    """Validated onboarding data.

    Stored under the ``userProfile`` key with camelCase field
    names, so ``activity_level`` is serialized as ``activityLevel``.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1)
    age: int = Field(ge=15, le=120)
    weight: float = Field(ge=30, le=300)
    height: float = Field(ge=120, le=250)
    gender: Gender
    activity_level: ActivityLevel = Field(alias="activityLevel")
    goal: Goal

    def to_json(self) -> str:
        """Serialize the profile for the key-value store."""
        return self.model_dump_json(by_alias=True)
