"""
Fitness document domain models and canonical schema.

This module defines the single root document that holds all tracked data,
plus the per-day workout and meal records it contains. JSON field names are
camelCase so the persisted blob keeps the layout existing backups use.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fitness_ledger.utils.dates import today, to_iso
from fitness_ledger.utils.exceptions import InvalidInputError

MEAL_SLOTS = ("breakfast", "lunch", "snack", "dinner")

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, allow_inf_nan=False)


class Profile(BaseModel):
    """User profile."""

    name: str = Field(description="Display name")
    height_cm: float = Field(alias="heightCm", description="Height in centimeters")

    model_config = _MODEL_CONFIG


class Targets(BaseModel):
    """Weight, nutrition and hydration targets."""

    start_weight: float = Field(alias="startWeight", description="Starting weight in kilograms")
    goal_weight: float = Field(alias="goalWeight", description="Goal weight in kilograms")
    daily_calories: float = Field(alias="dailyCalories", description="Daily calorie target (kcal)")
    protein_target: float = Field(alias="proteinTarget", description="Daily protein target (g)")
    water_target_l: float = Field(alias="waterTargetL", description="Daily water target (L)")

    model_config = _MODEL_CONFIG


class Exercise(BaseModel):
    """Single exercise entry in a day's workout plan."""

    id: str = Field(min_length=1, description="Opaque identifier, unique within a plan")
    name: str = Field(description="Exercise name")
    sets: int = Field(ge=0, description="Number of sets")
    reps: int = Field(ge=0, description="Repetitions per set")
    weight_kg: float | None = Field(None, alias="weightKg", description="Load in kilograms")

    model_config = _MODEL_CONFIG


class WorkoutRecord(BaseModel):
    """Workout plan for one day. Plan order is display order."""

    plan: list[Exercise] = Field(default_factory=list)
    completed: bool = False

    model_config = _MODEL_CONFIG

    @field_validator("plan")
    @classmethod
    def _check_unique_ids(cls, plan: list[Exercise]) -> list[Exercise]:
        ids = [exercise.id for exercise in plan]
        if len(ids) != len(set(ids)):
            raise ValueError("exercise ids must be unique within a plan")
        return plan

    def exercise_ids(self) -> set[str]:
        """Ids currently used in the plan."""
        return {exercise.id for exercise in self.plan}


class MealRecord(BaseModel):
    """Free-text meal plan for one day."""

    breakfast: str | None = None
    lunch: str | None = None
    snack: str | None = None
    dinner: str | None = None
    completed: bool = False

    model_config = _MODEL_CONFIG


class FitnessDocument(BaseModel):
    """
    Root document holding all tracked health data.

    The four date maps are independent: a date present in one carries no
    implication for the others.
    """

    profile: Profile
    targets: Targets
    weights: dict[str, float] = Field(default_factory=dict, description="ISO date -> kg")
    hydration: dict[str, float] = Field(default_factory=dict, description="ISO date -> liters")
    workouts: dict[str, WorkoutRecord] = Field(default_factory=dict)
    meals: dict[str, MealRecord] = Field(default_factory=dict)

    model_config = _MODEL_CONFIG

    @field_validator("weights", "hydration", "workouts", "meals")
    @classmethod
    def _check_date_keys(cls, value: dict[str, Any]) -> dict[str, Any]:
        for key in value:
            try:
                canonical = to_iso(key)
            except InvalidInputError as e:
                raise ValueError(str(e)) from e
            if canonical != key:
                raise ValueError(f"Non-canonical date key: {key!r}")
        return value

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the document to its JSON-compatible representation.

        Optional fields that are unset are omitted rather than written as null.

        Returns:
            Dictionary keyed by the camelCase field names.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_document(day: date | None = None, timezone_str: str = "UTC") -> FitnessDocument:
    """
    Build the built-in starting document.

    Args:
        day: Date seeded with the starting weight and zero hydration.
        timezone_str: Timezone used to resolve today when `day` is not given.

    Returns:
        Fresh default document.
    """
    seed = to_iso(day if day is not None else today(timezone_str))

    return FitnessDocument(
        profile=Profile(name="Deependu", height_cm=175),
        targets=Targets(
            start_weight=82,
            goal_weight=75,
            daily_calories=1850,
            protein_target=140,
            water_target_l=3,
        ),
        weights={seed: 82.0},
        hydration={seed: 0.0},
        workouts={},
        meals={},
    )
