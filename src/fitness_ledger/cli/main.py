"""
Command-line interface for Fitness Ledger.

Provides commands for logging weight, hydration, workouts and meals, and
for viewing, exporting and importing the tracked data.
"""

from pathlib import Path
from typing import Any, NoReturn

import typer

from fitness_ledger.domain.document import MEAL_SLOTS
from fitness_ledger.infrastructure.storage import JsonFileStorage
from fitness_ledger.services.aggregation import (
    contribution_series,
    group_weeks,
    hydration_progress,
    weight_trend_series,
)
from fitness_ledger.services.report import ReportService
from fitness_ledger.services.store import FitnessStore
from fitness_ledger.utils.dates import parse_date_input
from fitness_ledger.utils.exceptions import FitnessLedgerError
from fitness_ledger.utils.logging_config import get_logger, setup_logging
from fitness_ledger.utils.parameters import ParameterLoader

app = typer.Typer(help="Fitness Ledger - Local weight, hydration, workout and meal tracking")

logger = get_logger(__name__)

CONFIG_OPTION = typer.Option("config/config.yaml", help="Path to configuration file")
DATE_OPTION = typer.Option(None, "--date", help="Date (default: today)")

GRID_CELLS = {0: ".", 1: "+", 2: "#"}


def init_config(config_path: str = "config/config.yaml") -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config())
    return param_loader


def open_store(param_loader: ParameterLoader) -> FitnessStore:
    """Open the store configured by `param_loader`."""
    storage_config = param_loader.get_storage_config()
    export_config = param_loader.get_export_config()

    return FitnessStore.open(
        JsonFileStorage(storage_config.data_dir),
        storage_key=storage_config.storage_key,
        timezone=param_loader.get_analytics_config().timezone,
        export_filename=export_config.filename,
        export_indent=export_config.indent,
    )


def resolve_date(param_loader: ParameterLoader, value: str | None) -> str:
    """Parse a user-entered date in the configured timezone."""
    return parse_date_input(value, param_loader.get_analytics_config().timezone)


def fail(action: str, error: Exception) -> NoReturn:
    """Log and report a failed command, then exit with status 1."""
    logger.error(f"{action} failed: {error}")
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1) from error


@app.command()
def weight(
    kg: float = typer.Argument(..., help="Weight in kilograms"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Record the weight for a day."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        store.set_weight(day, kg)
        typer.echo(f"{day}: {kg:.1f} kg")

    except FitnessLedgerError as e:
        fail("Weight", e)


@app.command("water-add")
def water_add(
    liters: float = typer.Argument(..., help="Liters to add (negative subtracts)"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Add water to a day's hydration total."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        document = store.add_hydration(day, liters)
        total = document.hydration[day]
        typer.echo(
            f"{day}: {total:.2f} L of {document.targets.water_target_l:g} L "
            f"({hydration_progress(document, day):.0f}%)"
        )

    except FitnessLedgerError as e:
        fail("Hydration", e)


@app.command("water-set")
def water_set(
    liters: float = typer.Argument(..., help="Total liters for the day"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Overwrite a day's hydration total."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        store.set_hydration(day, liters)
        typer.echo(f"{day}: {liters:.2f} L")

    except FitnessLedgerError as e:
        fail("Hydration", e)


@app.command("exercise-add")
def exercise_add(
    name: str = typer.Argument(..., help="Exercise name"),
    sets: int = typer.Option(3, min=0, help="Number of sets"),
    reps: int = typer.Option(10, min=0, help="Repetitions per set"),
    weight_kg: float | None = typer.Option(None, help="Load in kilograms"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Append an exercise to a day's workout plan."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        exercise = store.add_exercise(day, name, sets, reps, weight_kg)
        typer.echo(f"Added {exercise.name} ({exercise.sets}x{exercise.reps}) as {exercise.id}")

    except FitnessLedgerError as e:
        fail("Add exercise", e)


@app.command("exercise-remove")
def exercise_remove(
    exercise_id: str = typer.Argument(..., help="Id of the exercise to remove"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Remove an exercise from a day's workout plan."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        document = store.remove_exercise(day, exercise_id)
        record = document.workouts.get(day)
        typer.echo(f"{day}: {len(record.plan) if record is not None else 0} exercises left")

    except FitnessLedgerError as e:
        fail("Remove exercise", e)


@app.command("workout-done")
def workout_done(
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Toggle a day's workout completion."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        document = store.toggle_workout_done(day)
        state = "done" if document.workouts[day].completed else "not done"
        typer.echo(f"{day}: workout {state}")

    except FitnessLedgerError as e:
        fail("Toggle workout", e)


@app.command("workout-delete")
def workout_delete(
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Delete a day's workout record."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        store.delete_workout(day)
        typer.echo(f"{day}: workout deleted")

    except FitnessLedgerError as e:
        fail("Delete workout", e)


@app.command()
def meal(
    breakfast: str | None = typer.Option(None, help="Breakfast"),
    lunch: str | None = typer.Option(None, help="Lunch"),
    snack: str | None = typer.Option(None, help="Snack"),
    dinner: str | None = typer.Option(None, help="Dinner"),
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Set meals for a day. Meals not given are kept."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        values = (breakfast, lunch, snack, dinner)
        fields = {
            slot: value for slot, value in zip(MEAL_SLOTS, values) if value is not None
        }
        document = store.upsert_meal(day, fields)
        record = document.meals[day]
        typer.echo(f"{day}: {_format_meal(record.model_dump())}")

    except FitnessLedgerError as e:
        fail("Meal", e)


@app.command("meal-done")
def meal_done(
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Toggle a day's meal completion."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        document = store.toggle_meal_done(day)
        state = "done" if document.meals[day].completed else "not done"
        typer.echo(f"{day}: meals {state}")

    except FitnessLedgerError as e:
        fail("Toggle meal", e)


@app.command("meal-delete")
def meal_delete(
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Delete a day's meal record."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)

        store.delete_meal(day)
        typer.echo(f"{day}: meals deleted")

    except FitnessLedgerError as e:
        fail("Delete meal", e)


@app.command()
def profile(
    name: str | None = typer.Option(None, help="Display name"),
    height_cm: float | None = typer.Option(None, help="Height in centimeters"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Show or update the profile."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        fields = {"name": name, "height_cm": height_cm}
        fields = {k: v for k, v in fields.items() if v is not None}
        document = store.update_profile(**fields) if fields else store.document

        typer.echo(f"Name: {document.profile.name}")
        typer.echo(f"Height: {document.profile.height_cm:g} cm")

    except FitnessLedgerError as e:
        fail("Profile", e)


@app.command()
def targets(
    start_weight: float | None = typer.Option(None, help="Starting weight (kg)"),
    goal_weight: float | None = typer.Option(None, help="Goal weight (kg)"),
    daily_calories: float | None = typer.Option(None, help="Daily calories (kcal)"),
    protein_target: float | None = typer.Option(None, help="Daily protein (g)"),
    water_target_l: float | None = typer.Option(None, help="Daily water (L)"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Show or update the targets."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        fields: dict[str, Any] = {
            "start_weight": start_weight,
            "goal_weight": goal_weight,
            "daily_calories": daily_calories,
            "protein_target": protein_target,
            "water_target_l": water_target_l,
        }
        fields = {k: v for k, v in fields.items() if v is not None}
        document = store.update_targets(**fields) if fields else store.document

        t = document.targets
        typer.echo(f"Start weight: {t.start_weight:g} kg")
        typer.echo(f"Goal weight: {t.goal_weight:g} kg")
        typer.echo(f"Daily calories: {t.daily_calories:g} kcal")
        typer.echo(f"Protein: {t.protein_target:g} g")
        typer.echo(f"Water: {t.water_target_l:g} L")

    except FitnessLedgerError as e:
        fail("Targets", e)


@app.command()
def show(
    date: str | None = DATE_OPTION,
    config_path: str = CONFIG_OPTION,
) -> None:
    """Show everything recorded for a day."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)
        day = resolve_date(param_loader, date)
        document = store.document

        typer.echo(f"=== {day} ===")

        kg = document.weights.get(day)
        typer.echo(f"Weight: {kg:.1f} kg" if kg is not None else "Weight: -")

        water = document.hydration.get(day, 0.0)
        typer.echo(
            f"Water: {water:.2f} L of {document.targets.water_target_l:g} L "
            f"({hydration_progress(document, day):.0f}%)"
        )

        workout = document.workouts.get(day)
        if workout is None:
            typer.echo("Workout: no plan")
        else:
            typer.echo(f"Workout: {'done' if workout.completed else 'pending'}")
            for exercise in workout.plan:
                load = f" @ {exercise.weight_kg:g} kg" if exercise.weight_kg is not None else ""
                typer.echo(
                    f"  [{exercise.id}] {exercise.name} {exercise.sets}x{exercise.reps}{load}"
                )

        record = document.meals.get(day)
        if record is None:
            typer.echo("Meals: no plan")
        else:
            typer.echo(f"Meals ({'done' if record.completed else 'pending'}): "
                       f"{_format_meal(record.model_dump())}")

    except FitnessLedgerError as e:
        fail("Show", e)


def _format_meal(record: dict[str, Any]) -> str:
    parts = [
        f"{slot}: {record[slot]}"
        for slot in MEAL_SLOTS
        if record.get(slot)
    ]
    return " | ".join(parts) or "no plan"


@app.command()
def grid(
    days: int | None = typer.Option(None, min=1, help="Days to show (default from config)"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """
    Print the consistency grid.

    One column per week, oldest on the left. "#" marks a day with both
    workout and meals done, "+" one of them, "." neither.
    """
    try:
        param_loader = init_config(config_path)
        analytics = param_loader.get_analytics_config()
        store = open_store(param_loader)

        series = contribution_series(
            days or analytics.contribution_days,
            store.document,
            timezone_str=analytics.timezone,
        )
        weeks = group_weeks(series)

        for row in range(7):
            typer.echo(
                " ".join(GRID_CELLS[week[row].score] if row < len(week) else " " for week in weeks)
            )

        active = sum(1 for day in series if day.score > 0)
        typer.echo(f"\n{active}/{len(series)} active days since {series[0].date}")

    except FitnessLedgerError as e:
        fail("Grid", e)


@app.command()
def trend(config_path: str = CONFIG_OPTION) -> None:
    """Print all weight readings in date order."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        points = weight_trend_series(store.document)
        if not points:
            typer.echo("No weight readings")
            return

        for point in points:
            typer.echo(f"{point.date}  {point.kg:6.1f} kg")

    except FitnessLedgerError as e:
        fail("Trend", e)


@app.command()
def eta(config_path: str = CONFIG_OPTION) -> None:
    """Project when the goal weight is reached."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        projection = store.eta
        goal = store.document.targets.goal_weight

        if projection is None:
            typer.echo("ETA: insufficient data")
        elif projection.goal_reached:
            typer.echo(f"Goal of {goal:g} kg reached")
        else:
            typer.echo(f"Rate: {projection.rate:.3f} kg/day")
            typer.echo(f"ETA: {projection.eta_date} (~{projection.days_left} days)")

    except FitnessLedgerError as e:
        fail("ETA", e)


@app.command()
def export(
    output_dir: str = typer.Option(".", help="Directory the backup is written to"),
    stdout: bool = typer.Option(False, "--stdout", help="Print JSON instead of writing a file"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Export all data as JSON."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        if stdout:
            typer.echo(store.export_json())
            return

        path = store.export_to_file(output_dir)
        typer.echo(f"Exported to {path}")

    except FitnessLedgerError as e:
        fail("Export", e)
    except OSError as e:
        fail("Export", e)


@app.command("import")
def import_(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON backup to import"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Import a JSON backup, merging it over the current data."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        store.import_json(file.read_text(encoding="utf-8"))
        typer.echo("Imported")

    except FitnessLedgerError as e:
        fail("Import", e)
    except (OSError, UnicodeDecodeError) as e:
        fail("Import", e)


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Reset all local data to defaults."""
    try:
        param_loader = init_config(config_path)
        store = open_store(param_loader)

        if not yes and not typer.confirm("Reset all local data to defaults?"):
            typer.echo("Aborted")
            raise typer.Exit(code=1)

        store.reset()
        typer.echo("Data reset to defaults")

    except FitnessLedgerError as e:
        fail("Reset", e)


@app.command()
def report(
    days: int | None = typer.Option(None, min=1, help="Days in the contribution window"),
    config_path: str = CONFIG_OPTION,
) -> None:
    """Write weight trend, contribution and weekly summary CSV reports."""
    try:
        param_loader = init_config(config_path)
        analytics = param_loader.get_analytics_config()
        store = open_store(param_loader)

        series = contribution_series(
            days or analytics.contribution_days,
            store.document,
            timezone_str=analytics.timezone,
        )

        service = ReportService(param_loader.get_report_config())
        paths = [
            service.write_weight_trend(weight_trend_series(store.document)),
            service.write_contributions(series),
            service.write_weekly_summary(series),
        ]

        for path in paths:
            typer.echo(f"  - {path}")

    except FitnessLedgerError as e:
        fail("Report", e)


if __name__ == "__main__":
    app()
