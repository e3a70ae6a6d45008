"""Read models produced by the aggregation functions."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ContributionDay(BaseModel):
    """Completion status of a single day in the consistency grid."""

    date: str = Field(description="ISO date")
    workout_done: bool = False
    meal_done: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def score(self) -> int:
        """Number of completed record types for the day (0-2)."""
        return int(self.workout_done) + int(self.meal_done)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "date": self.date,
            "workout_done": self.workout_done,
            "meal_done": self.meal_done,
            "score": self.score,
        }


class WeightPoint(BaseModel):
    """Single dated weight reading."""

    date: str = Field(description="ISO date")
    kg: float

    model_config = ConfigDict(frozen=True)


class EtaProjection(BaseModel):
    """Linear extrapolation of the weight-loss rate to the goal weight."""

    rate: float = Field(description="Kilograms lost per day")
    eta_date: str = Field(description="Projected ISO date the goal is reached")
    days_left: int = Field(description="Rounded days from the latest reading to the goal")

    model_config = ConfigDict(frozen=True)

    @property
    def goal_reached(self) -> bool:
        """True when the latest reading is already at or below the goal."""
        return self.days_left <= 0
