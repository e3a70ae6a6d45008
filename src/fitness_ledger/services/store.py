"""
Fitness data store.

Owns the canonical document, applies mutation operations to it and
persists every new version through a storage adapter.
"""

import logging
import math
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fitness_ledger.domain.analytics import EtaProjection
from fitness_ledger.domain.document import (
    Exercise,
    FitnessDocument,
    MealRecord,
    WorkoutRecord,
    default_document,
)
from fitness_ledger.infrastructure.storage import StorageAdapter
from fitness_ledger.services import codec
from fitness_ledger.services.aggregation import eta_projection, weight_trend_series
from fitness_ledger.utils.dates import to_iso
from fitness_ledger.utils.exceptions import InvalidInputError
from fitness_ledger.utils.ids import generate_id

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "deependu_fitness_v1"
DEFAULT_EXPORT_FILENAME = "deependu_fitness_backup.json"

M = TypeVar("M", bound=BaseModel)

ExportSink = Callable[[str, str], None]


def _coerce_number(value: Any, label: str) -> float:
    """
    Coerce a numeric input to a finite float.

    Raises:
        InvalidInputError: If the value is not numeric, NaN or infinite.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"{label} must be a number, got {value!r}")

    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"{label} must be a number, got {value!r}") from e

    if not math.isfinite(number):
        raise InvalidInputError(f"{label} must be finite, got {value!r}")

    return number


def _merge_fields(model: M, fields: Mapping[str, Any]) -> M:
    """
    Shallow-merge `fields` into a model, accepting field names or JSON aliases.

    Raises:
        InvalidInputError: If a field is unknown or the result fails validation.
    """
    names: dict[str, str] = {}
    for name, info in type(model).model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name

    unknown = sorted(set(fields) - set(names))
    if unknown:
        raise InvalidInputError(f"Unknown {type(model).__name__} fields: {unknown}")

    data = model.model_dump()
    data.update({names[key]: value for key, value in fields.items()})

    try:
        return type(model).model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid {type(model).__name__}: {e}") from e


class FitnessStore:
    """
    Store for the fitness document.

    Every operation replaces the current document with a new immutable
    value and then persists it. Persistence failures are logged by the
    adapter and never reach the caller, so the in-memory state always
    reflects the latest mutation.
    """

    def __init__(
        self,
        storage: StorageAdapter,
        document: FitnessDocument | None = None,
        storage_key: str = DEFAULT_STORAGE_KEY,
        timezone: str = "UTC",
        export_filename: str = DEFAULT_EXPORT_FILENAME,
        export_indent: int = 2,
    ) -> None:
        """
        Initialize the store.

        Args:
            storage: Persistence adapter.
            document: Initial document. Defaults to the built-in defaults.
            storage_key: Storage slot the document is written to.
            timezone: Timezone used to resolve "today" for defaults.
            export_filename: Suggested filename for exports.
            export_indent: Indentation width of exported JSON.
        """
        self.storage = storage
        self.storage_key = storage_key
        self.timezone = timezone
        self.export_filename = export_filename
        self.export_indent = export_indent
        self._document = document if document is not None else default_document(
            timezone_str=timezone
        )

    @classmethod
    def open(
        cls,
        storage: StorageAdapter,
        storage_key: str = DEFAULT_STORAGE_KEY,
        timezone: str = "UTC",
        **kwargs: Any,
    ) -> "FitnessStore":
        """
        Create a store from the persisted document.

        Falls back to the defaults when nothing is stored, or when the stored
        blob cannot be read, parsed or validated.

        Args:
            storage: Persistence adapter.
            storage_key: Storage slot to read.
            timezone: Timezone used to resolve "today" for defaults.
            **kwargs: Further keyword arguments for the constructor.

        Returns:
            Store holding the restored or default document.
        """
        stored = storage.load(storage_key, None)
        document: FitnessDocument | None = None

        if stored is not None:
            try:
                document = FitnessDocument.model_validate(stored)
                logger.info(f"Restored document from {storage_key!r}")
            except ValidationError as e:
                logger.warning(f"Stored document is invalid, using defaults: {e}")

        store = cls(storage, document=document, storage_key=storage_key, timezone=timezone, **kwargs)

        if document is None:
            logger.info("Initializing document from defaults")
            store._commit(store.document)

        return store

    @property
    def document(self) -> FitnessDocument:
        """Current document snapshot."""
        return self._document

    @property
    def eta(self) -> EtaProjection | None:
        """ETA projection of the current weights toward the goal weight."""
        return eta_projection(
            weight_trend_series(self._document), self._document.targets.goal_weight
        )

    def _commit(self, document: FitnessDocument) -> FitnessDocument:
        self._document = document
        self.storage.save(self.storage_key, document.to_dict())
        return document

    def _workout(self, day: str) -> WorkoutRecord:
        record = self._document.workouts.get(day)
        return record if record is not None else WorkoutRecord()

    def _meal(self, day: str) -> MealRecord:
        record = self._document.meals.get(day)
        return record if record is not None else MealRecord()

    def _put_workout(self, day: str, record: WorkoutRecord) -> FitnessDocument:
        workouts = {**self._document.workouts, day: record}
        return self._commit(self._document.model_copy(update={"workouts": workouts}))

    def _put_meal(self, day: str, record: MealRecord) -> FitnessDocument:
        meals = {**self._document.meals, day: record}
        return self._commit(self._document.model_copy(update={"meals": meals}))

    # weights

    def set_weight(self, day: Any, kg: Any) -> FitnessDocument:
        """Record the weight for a day, replacing any earlier reading."""
        key = to_iso(day)
        value = _coerce_number(kg, "weight")
        logger.debug(f"Set weight {key} = {value}")

        weights = {**self._document.weights, key: value}
        return self._commit(self._document.model_copy(update={"weights": weights}))

    # hydration

    def add_hydration(self, day: Any, liters: Any) -> FitnessDocument:
        """Add liters to a day's hydration total. Negative amounts subtract."""
        key = to_iso(day)
        amount = _coerce_number(liters, "liters")
        total = self._document.hydration.get(key, 0.0) + amount
        logger.debug(f"Add hydration {key} += {amount} -> {total}")

        hydration = {**self._document.hydration, key: total}
        return self._commit(self._document.model_copy(update={"hydration": hydration}))

    def set_hydration(self, day: Any, liters: Any) -> FitnessDocument:
        """Overwrite a day's hydration total."""
        key = to_iso(day)
        amount = _coerce_number(liters, "liters")
        logger.debug(f"Set hydration {key} = {amount}")

        hydration = {**self._document.hydration, key: amount}
        return self._commit(self._document.model_copy(update={"hydration": hydration}))

    # workouts

    def upsert_workout(
        self, day: Any, plan: Iterable[Exercise | Mapping[str, Any]]
    ) -> FitnessDocument:
        """
        Replace the exercise plan for a day, keeping its completion flag.

        Args:
            day: Date of the workout.
            plan: Exercises in display order, as models or mappings.

        Raises:
            InvalidInputError: If an exercise is invalid or ids repeat.
        """
        key = to_iso(day)
        current = self._workout(key)

        try:
            record = WorkoutRecord(plan=list(plan), completed=current.completed)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid workout plan for {key}: {e}") from e

        logger.debug(f"Upsert workout {key} with {len(record.plan)} exercises")
        return self._put_workout(key, record)

    def add_exercise(
        self,
        day: Any,
        name: str,
        sets: int,
        reps: int,
        weight_kg: float | None = None,
    ) -> Exercise:
        """
        Append a new exercise with a fresh id to a day's plan.

        Returns:
            The created exercise.
        """
        key = to_iso(day)
        current = self._workout(key)

        try:
            exercise = Exercise(
                id=generate_id("ex_", taken=current.exercise_ids()),
                name=name,
                sets=sets,
                reps=reps,
                weight_kg=weight_kg,
            )
        except ValidationError as e:
            raise InvalidInputError(f"Invalid exercise: {e}") from e

        self.upsert_workout(key, [*current.plan, exercise])
        return exercise

    def remove_exercise(self, day: Any, exercise_id: str) -> FitnessDocument:
        """Remove an exercise by id. Unknown ids leave the plan unchanged."""
        key = to_iso(day)
        if key not in self._document.workouts:
            logger.debug(f"No workout on {key}")
            return self._commit(self._document)

        current = self._workout(key)
        plan = [exercise for exercise in current.plan if exercise.id != exercise_id]

        if len(plan) == len(current.plan):
            logger.debug(f"No exercise {exercise_id!r} on {key}")

        return self.upsert_workout(key, plan)

    def toggle_workout_done(self, day: Any) -> FitnessDocument:
        """Flip a day's workout completion, creating an empty record if needed."""
        key = to_iso(day)
        current = self._workout(key)
        record = current.model_copy(update={"completed": not current.completed})
        logger.debug(f"Workout {key} completed={record.completed}")
        return self._put_workout(key, record)

    def delete_workout(self, day: Any) -> FitnessDocument:
        """Remove a day's workout record entirely."""
        key = to_iso(day)
        workouts = {d: r for d, r in self._document.workouts.items() if d != key}
        logger.debug(f"Delete workout {key}")
        return self._commit(self._document.model_copy(update={"workouts": workouts}))

    # meals

    def upsert_meal(
        self, day: Any, meal: Mapping[str, Any] | MealRecord | None = None, **fields: Any
    ) -> FitnessDocument:
        """
        Merge meal fields into a day's record, keeping its completion flag.

        Fields not given are preserved. A `completed` value in the input is ignored.

        Args:
            day: Date of the meals.
            meal: Partial meal fields, as a mapping or record.
            **fields: Further meal fields, e.g. ``lunch="Dal and rice"``.
        """
        key = to_iso(day)
        current = self._meal(key)

        if isinstance(meal, MealRecord):
            partial: dict[str, Any] = meal.model_dump(exclude_unset=True)
        else:
            partial = dict(meal or {})
        partial.update(fields)
        partial.pop("completed", None)

        record = _merge_fields(current, partial)
        logger.debug(f"Upsert meal {key}: {sorted(partial)}")
        return self._put_meal(key, record)

    def toggle_meal_done(self, day: Any) -> FitnessDocument:
        """Flip a day's meal completion, creating an empty record if needed."""
        key = to_iso(day)
        current = self._meal(key)
        record = current.model_copy(update={"completed": not current.completed})
        logger.debug(f"Meal {key} completed={record.completed}")
        return self._put_meal(key, record)

    def delete_meal(self, day: Any) -> FitnessDocument:
        """Remove a day's meal record entirely."""
        key = to_iso(day)
        meals = {d: r for d, r in self._document.meals.items() if d != key}
        logger.debug(f"Delete meal {key}")
        return self._commit(self._document.model_copy(update={"meals": meals}))

    # settings

    def update_profile(self, **fields: Any) -> FitnessDocument:
        """Shallow-merge fields into the profile."""
        profile = _merge_fields(self._document.profile, fields)
        return self._commit(self._document.model_copy(update={"profile": profile}))

    def update_targets(self, **fields: Any) -> FitnessDocument:
        """Shallow-merge fields into the targets."""
        targets = _merge_fields(self._document.targets, fields)
        return self._commit(self._document.model_copy(update={"targets": targets}))

    # export / import

    def export_json(self, sink: ExportSink | None = None) -> str:
        """
        Serialize the current document for export.

        Args:
            sink: Optional callable receiving the JSON text and the suggested filename.

        Returns:
            Pretty-printed JSON text.
        """
        text = codec.serialize(self._document, indent=self.export_indent)
        if sink is not None:
            sink(text, self.export_filename)
        logger.info(f"Exported document ({len(text)} bytes)")
        return text

    def export_to_file(self, directory: str | Path) -> Path:
        """
        Write the export under the suggested filename in `directory`.

        Returns:
            Path of the written file.
        """
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / self.export_filename

        def write(text: str, filename: str) -> None:
            path.write_text(text, encoding="utf-8")

        self.export_json(sink=write)
        return path

    def import_json(self, raw: str | bytes) -> FitnessDocument:
        """
        Merge an imported JSON document onto the current one.

        Raises:
            InvalidFormatError: If `raw` is not a valid document; nothing changes.
        """
        document = codec.merge(self._document, raw)
        logger.info("Imported document")
        return self._commit(document)

    def reset(self) -> FitnessDocument:
        """Replace the document and its stored copy with fresh defaults."""
        logger.info("Resetting document to defaults")
        return self._commit(default_document(timezone_str=self.timezone))
