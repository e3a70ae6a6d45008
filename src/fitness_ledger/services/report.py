"""
Report service for writing derived views to CSV.

Writes the weight trend, the contribution series and a weekly consistency
summary built from it.
"""

import logging
from pathlib import Path

import pandas as pd

from fitness_ledger.domain.analytics import ContributionDay, WeightPoint
from fitness_ledger.utils.exceptions import ReportError
from fitness_ledger.utils.parameters import ReportConfig

logger = logging.getLogger(__name__)

WEEK_LENGTH = 7


class ReportService:
    """
    Service for writing analytics reports.

    Each report is a single CSV file under the configured output directory.
    """

    def __init__(self, config: ReportConfig) -> None:
        """
        Initialize report service.

        Args:
            config: Report configuration.
        """
        self.config = config
        self.output_dir = Path(config.dir)

    def _write(self, df: pd.DataFrame, file_name: str) -> Path:
        path = self.output_dir / file_name

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            df.to_csv(path, index=False, encoding="utf-8")
        except OSError as e:
            raise ReportError(f"Failed to write report {path}: {e}") from e

        logger.info(f"Wrote {len(df)} rows to {path}")
        return path

    def write_weight_trend(self, trend: list[WeightPoint]) -> Path:
        """
        Write weight readings with the day-over-day change.

        Args:
            trend: Weight readings sorted by date.

        Returns:
            Path of the written CSV.
        """
        df = pd.DataFrame(
            {
                "date": [p.date for p in trend],
                "kg": pd.Series([p.kg for p in trend], dtype="float64"),
            }
        )
        df["change_kg"] = df["kg"].diff().round(3)

        return self._write(df, self.config.files.weight_trend)

    def write_contributions(self, series: list[ContributionDay]) -> Path:
        """
        Write the per-day contribution series.

        Args:
            series: Contribution days, oldest first.

        Returns:
            Path of the written CSV.
        """
        df = pd.DataFrame(
            [day.to_dict() for day in series],
            columns=["date", "workout_done", "meal_done", "score"],
        )

        return self._write(df, self.config.files.contributions)

    def build_weekly_summary(self, series: list[ContributionDay]) -> pd.DataFrame:
        """
        Summarize the contribution series in consecutive 7-day columns.

        Columns follow the grid layout: the first column starts at the
        oldest day, so the last one may hold fewer than seven days.

        Args:
            series: Contribution days, oldest first.

        Returns:
            One row per column with its date span and completion counts.
        """
        columns = ["week", "start", "end", "days", "workouts_done", "meals_done", "score"]
        if not series:
            return pd.DataFrame(columns=columns)

        df = pd.DataFrame([day.to_dict() for day in series])
        df["week"] = df.index // WEEK_LENGTH

        summary = (
            df.groupby("week")
            .agg(
                start=("date", "min"),
                end=("date", "max"),
                days=("date", "count"),
                workouts_done=("workout_done", "sum"),
                meals_done=("meal_done", "sum"),
                score=("score", "sum"),
            )
            .reset_index()
        )

        return summary[columns]

    def write_weekly_summary(self, series: list[ContributionDay]) -> Path:
        """Write the weekly consistency summary. Returns the CSV path."""
        return self._write(self.build_weekly_summary(series), self.config.files.weekly_summary)
