"""Unit tests for the import/export codec."""

import json
from datetime import date

import pytest

from fitness_ledger.domain.document import Exercise, MealRecord, WorkoutRecord, default_document
from fitness_ledger.services.codec import merge, serialize
from fitness_ledger.utils.exceptions import InvalidFormatError


def make_document():
    """Build a document with records in every map."""
    return default_document(day=date(2024, 1, 1)).model_copy(
        update={
            "weights": {"2024-01-01": 82.0, "2024-01-02": 81.6},
            "hydration": {"2024-01-01": 2.25},
            "workouts": {
                "2024-01-02": WorkoutRecord(
                    plan=[
                        Exercise(id="ex_1", name="Push-ups", sets=3, reps=10),
                        Exercise(id="ex_2", name="Rows", sets=4, reps=8, weight_kg=22.5),
                    ],
                    completed=True,
                )
            },
            "meals": {"2024-01-02": MealRecord(breakfast="Oats", dinner="Soup")},
        }
    )


def test_serialize_layout() -> None:
    """Test that exported JSON uses the camelCase document layout."""
    text = serialize(make_document())
    data = json.loads(text)

    if set(data) != {"profile", "targets", "weights", "hydration", "workouts", "meals"}:
        raise AssertionError(f"Unexpected top-level keys: {sorted(data)}")
    if data["profile"] != {"name": "Deependu", "heightCm": 175.0}:
        raise AssertionError(f"Unexpected profile: {data['profile']}")
    if data["targets"]["waterTargetL"] != 3:
        raise AssertionError(f"Unexpected targets: {data['targets']}")

    plan = data["workouts"]["2024-01-02"]["plan"]
    if "weightKg" in plan[0] or plan[1]["weightKg"] != 22.5:
        raise AssertionError(f"Unexpected plan layout: {plan}")
    if data["meals"]["2024-01-02"] != {"breakfast": "Oats", "dinner": "Soup", "completed": False}:
        raise AssertionError(f"Unexpected meal layout: {data['meals']}")
    if "\n  " not in text:
        raise AssertionError("Expected pretty-printed JSON")


def test_round_trip_is_identity() -> None:
    """Test that importing an export reproduces the document."""
    document = make_document()

    restored = merge(document, serialize(document))

    if restored.to_dict() != document.to_dict():
        raise AssertionError("Round trip changed the document")


def test_merge_replaces_nested_objects_wholesale() -> None:
    """Test that nested objects in an import replace, not merge."""
    document = make_document()
    raw = json.dumps({"profile": {"name": "Asha", "heightCm": 160}})

    merged = merge(document, raw)

    if merged.profile.name != "Asha" or merged.profile.height_cm != 160:
        raise AssertionError(f"Unexpected profile: {merged.profile}")
    if merged.weights != document.weights:
        raise AssertionError("Expected weights to be retained")


def test_merge_ignores_unknown_keys() -> None:
    """Test that unknown top-level keys are dropped."""
    merged = merge(make_document(), json.dumps({"version": 3}))

    if "version" in merged.to_dict():
        raise AssertionError("Unknown key leaked into the document")


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[1, 2]",
        '"text"',
        '{"profile": {"name": "Asha"}}',
        '{"weights": {"2024-1-1": 80}}',
        '{"weights": {"2024-01-01": "heavy"}}',
    ],
)
def test_merge_rejects_invalid_input(raw: str) -> None:
    """Test that malformed or invalid imports raise InvalidFormatError."""
    document = make_document()
    before = serialize(document)

    with pytest.raises(InvalidFormatError):
        merge(document, raw)

    if serialize(document) != before:
        raise AssertionError("Document changed after failed merge")
