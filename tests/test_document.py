"""Unit tests for the document model."""

from datetime import date

import pytest
from pydantic import ValidationError

from fitness_ledger.domain.document import FitnessDocument, WorkoutRecord, default_document


def test_default_document() -> None:
    """Test the built-in defaults."""
    document = default_document(day=date(2024, 6, 1))

    if document.profile.name != "Deependu" or document.profile.height_cm != 175:
        raise AssertionError(f"Unexpected profile: {document.profile}")

    targets = document.targets
    expected = (82, 75, 1850, 140, 3)
    actual = (
        targets.start_weight,
        targets.goal_weight,
        targets.daily_calories,
        targets.protein_target,
        targets.water_target_l,
    )
    if actual != expected:
        raise AssertionError(f"Expected targets {expected}, got {actual}")

    if document.weights != {"2024-06-01": 82.0}:
        raise AssertionError(f"Unexpected seeded weights: {document.weights}")
    if document.hydration != {"2024-06-01": 0.0}:
        raise AssertionError(f"Unexpected seeded hydration: {document.hydration}")
    if document.workouts or document.meals:
        raise AssertionError("Expected no workouts or meals")


def test_document_accepts_aliases_and_field_names() -> None:
    """Test validation from camelCase JSON and from snake_case names."""
    camel = FitnessDocument.model_validate(
        {
            "profile": {"name": "A", "heightCm": 170},
            "targets": {
                "startWeight": 80,
                "goalWeight": 70,
                "dailyCalories": 2000,
                "proteinTarget": 120,
                "waterTargetL": 2.5,
            },
        }
    )

    if camel.profile.height_cm != 170 or camel.targets.water_target_l != 2.5:
        raise AssertionError("camelCase fields not read")
    if camel.weights != {}:
        raise AssertionError("Expected missing maps to default to empty")


@pytest.mark.parametrize("key", ["2024-1-1", "2024-13-01", "yesterday"])
def test_document_rejects_bad_date_keys(key: str) -> None:
    """Test that non-canonical date keys fail validation."""
    data = default_document(day=date(2024, 6, 1)).to_dict()
    data["weights"] = {key: 80}

    with pytest.raises(ValidationError):
        FitnessDocument.model_validate(data)


def test_document_rejects_nan_weight() -> None:
    """Test that non-finite numbers fail validation."""
    data = default_document(day=date(2024, 6, 1)).to_dict()
    data["weights"] = {"2024-06-02": float("nan")}

    with pytest.raises(ValidationError):
        FitnessDocument.model_validate(data)


def test_workout_record_defaults() -> None:
    """Test that implicit workout records start empty and incomplete."""
    record = WorkoutRecord()

    if record.plan != [] or record.completed:
        raise AssertionError(f"Unexpected defaults: {record}")


def test_document_is_frozen() -> None:
    """Test that documents cannot be mutated in place."""
    document = default_document(day=date(2024, 6, 1))

    with pytest.raises(ValidationError):
        document.profile = document.profile  # type: ignore[misc]
