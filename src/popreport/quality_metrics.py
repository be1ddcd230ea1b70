"""Data quality metrics for the loaded population table.

This module computes completeness, duplicate detection, invalid value
counts and year coverage for the raw observations, using DuckDB queries
over a pandas frame of the records.
"""

import json
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

import duckdb

from popreport.logging_config import create_logger
from popreport.models import Observation
from popreport.utils import records_to_frame

logger = create_logger(__name__)

TABLE_NAME = "observations"
FIRST_EXPECTED_YEAR = 1950


@dataclass
class DatasetMetrics:
    """Data quality metrics for one loaded population file."""

    dataset_name: str
    timestamp: str
    total_records: int
    total_countries: int
    total_years: int
    completeness_percentage: float
    invalid_population_count: int
    duplicate_count: int
    year_range_min: int
    year_range_max: int
    quality_score: float
    issues: List[str]


class QualityMetrics:
    """Calculate data quality metrics for a sequence of observations."""

    def __init__(self, connection: Optional[duckdb.DuckDBPyConnection] = None):
        """Initialize quality metrics calculator.

        Args:
            connection: DuckDB connection. If None, creates a new connection.
        """
        self.con = connection if connection else duckdb.connect()

    def register(self, observations: Sequence[Observation]) -> None:
        """Expose the observations to DuckDB as the ``observations`` view."""
        frame = records_to_frame(list(observations), Observation)
        frame = frame[["country", "year", "population"]].astype(
            {"country": "string", "year": "int64", "population": "float64"}
        )
        self.con.register(TABLE_NAME, frame)

    def count_records(self) -> Tuple[int, int, int]:
        """Return (records, distinct countries, distinct years)."""
        result = self.con.execute(
            f"""
            SELECT COUNT(*), COUNT(DISTINCT country), COUNT(DISTINCT year)
            FROM {TABLE_NAME}
            """
        ).fetchone()
        return int(result[0]), int(result[1]), int(result[2])

    def count_duplicates(self) -> int:
        """Count (country, year) pairs that occur more than once."""
        result = self.con.execute(
            f"""
            SELECT COUNT(*) FROM (
                SELECT country, year
                FROM {TABLE_NAME}
                GROUP BY country, year
                HAVING COUNT(*) > 1
            )
            """
        ).fetchone()
        return int(result[0]) if result and result[0] is not None else 0

    def count_invalid_population(self) -> int:
        """Count negative or nan population values."""
        result = self.con.execute(
            f"""
            SELECT COUNT(*) FROM {TABLE_NAME}
            WHERE population < 0 OR population IS NULL OR isnan(population)
            """
        ).fetchone()
        return int(result[0]) if result and result[0] is not None else 0

    def get_year_range(self) -> Tuple[int, int]:
        """Get the (min, max) year, or (0, 0) for an empty table."""
        result = self.con.execute(
            f"SELECT MIN(year), MAX(year) FROM {TABLE_NAME}"
        ).fetchone()
        if result and result[0] is not None and result[1] is not None:
            return int(result[0]), int(result[1])
        return 0, 0

    def calculate_quality_score(
        self,
        completeness: float,
        invalid_count: int,
        duplicate_count: int,
        total_records: int,
    ) -> float:
        """Calculate overall quality score based on multiple metrics.

        Quality score is calculated as:
        - 50% weight: Completeness percentage
        - 30% weight: Share of valid population values
        - 20% weight: Duplicate penalty (penalize if > 0.1% duplicates)

        Returns:
            Quality score (0-100)
        """
        completeness_score = completeness * 0.5

        invalid_rate = (invalid_count / total_records * 100) if total_records > 0 else 0
        validity_score = (100 - invalid_rate) * 0.3

        duplicate_rate = (duplicate_count / total_records * 100) if total_records > 0 else 0
        duplicate_score = max(0, (100 - duplicate_rate * 10)) * 0.2

        return round(completeness_score + validity_score + duplicate_score, 2)

    def calculate_dataset_metrics(
        self,
        observations: Sequence[Observation],
        dataset_name: str = TABLE_NAME,
        rows_dropped: int = 0,
    ) -> DatasetMetrics:
        """Calculate comprehensive metrics for the loaded observations.

        Args:
            observations: Raw observations from the loader
            dataset_name: Label used in the report (typically the file path)
            rows_dropped: Rows the loader skipped for missing fields

        Returns:
            DatasetMetrics object with all calculated metrics
        """
        logger.info(f"Calculating quality metrics for {dataset_name}")
        self.register(observations)

        total_records, total_countries, total_years = self.count_records()
        read_rows = total_records + rows_dropped
        completeness = (total_records / read_rows * 100) if read_rows > 0 else 0.0
        duplicate_count = self.count_duplicates()
        invalid_count = self.count_invalid_population()
        year_min, year_max = self.get_year_range()

        quality_score = self.calculate_quality_score(
            completeness, invalid_count, duplicate_count, total_records
        )

        issues = []
        if total_records == 0:
            issues.append("No observations loaded")
        if completeness < 100:
            issues.append(f"Dropped {rows_dropped} incomplete rows ({completeness:.2f}% complete)")
        if invalid_count > 0:
            issues.append(f"Found {invalid_count} negative or nan population values")
        if duplicate_count > 0:
            issues.append(f"Found {duplicate_count} duplicate (country, year) pairs")
        if total_records and (year_min < FIRST_EXPECTED_YEAR or year_max > date.today().year):
            issues.append(f"Year range outside expected bounds: {year_min}-{year_max}")

        metrics = DatasetMetrics(
            dataset_name=dataset_name,
            timestamp=datetime.now().isoformat(),
            total_records=total_records,
            total_countries=total_countries,
            total_years=total_years,
            completeness_percentage=round(completeness, 2),
            invalid_population_count=invalid_count,
            duplicate_count=duplicate_count,
            year_range_min=year_min,
            year_range_max=year_max,
            quality_score=quality_score,
            issues=issues,
        )

        logger.info(f"Metrics calculated for {dataset_name}: Quality Score = {quality_score}")
        for issue in issues:
            logger.warning(f"   ⚠️ {issue}")
        return metrics

    @staticmethod
    def export_metrics_json(metrics: DatasetMetrics, output_path: str) -> None:
        """Export metrics to a JSON file."""
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(asdict(metrics), f, indent=2)
        logger.info(f"Metrics exported to {output_path}")
