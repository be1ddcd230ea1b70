"""Report module producing the tables consumed by the population report.

This module runs the loader, quality checks, derived columns, decade
summary and country rankings in sequence, and optionally writes every
product to the output directory as CSV.

Usage:
    python -m popreport.report --input data/population.csv
    python -m popreport.report --format csv --output-dir output/
"""

import argparse
import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd

import popreport.config as config
from popreport.aggregate import summarize_by_decade
from popreport.exceptions import ExportError, PopReportBaseError
from popreport.ingest.run import Loader
from popreport.logging_config import create_logger, log_exception
from popreport.models import CountrySummary, DecadeSummary, Observation
from popreport.quality_metrics import DatasetMetrics, QualityMetrics
from popreport.rank import (
    filter_countries,
    top_by_average_population,
    top_by_peak_population,
)
from popreport.transform import compute_derived_columns
from popreport.utils import records_to_frame, standardize_filename

logger = create_logger(__name__)


@dataclass
class ReportTables:
    """Prepared tables handed to the presenter."""

    observations: List[Observation]
    decades: List[DecadeSummary]
    top_peak: List[CountrySummary]
    top_peak_series: List[Observation]
    top_average: List[CountrySummary]
    world_series: List[Observation]
    metrics: DatasetMetrics

    def frames(self) -> Dict[str, pd.DataFrame]:
        """Each table as a DataFrame, keyed by export name."""
        return {
            "observations": records_to_frame(self.observations, Observation),
            "decade_summary": records_to_frame(self.decades, DecadeSummary),
            "top_peak": records_to_frame(self.top_peak, CountrySummary),
            "top_peak_series": records_to_frame(self.top_peak_series, Observation),
            "top_average": records_to_frame(self.top_average, CountrySummary),
            "world_series": records_to_frame(self.world_series, Observation),
        }


class Report:
    """Build the population report tables from one input file.

    Settings default to ``popreport.config``; any argument given here
    takes precedence over the environment.
    """

    def __init__(
        self,
        input_path: Optional[str] = None,
        output_dir: Optional[str] = None,
        top_peak_n: Optional[int] = None,
        top_average_n: Optional[int] = None,
    ) -> None:
        settings = config.validate_config(
            population_csv=input_path,
            output_dir=output_dir,
            top_peak_n=top_peak_n,
            top_average_n=top_average_n,
        )
        self.input_path = settings["population_csv"]
        self.output_dir = settings["output_dir"]
        self.top_peak_n = settings["top_peak_n"]
        self.top_average_n = settings["top_average_n"]

        logger.info("🚀 Initializing Population Report")
        logger.info(f"   Input: {self.input_path}")
        logger.info(f"   Top-N: peak={self.top_peak_n}, average={self.top_average_n}")

    def build(self) -> ReportTables:
        """Run the pipeline and return the prepared tables.

        :raises LoadError: If the input file cannot be loaded
        :raises SchemaViolation: On a duplicate (country, year) pair
        """
        start_time = time.time()
        loader = Loader()
        try:
            raw = loader.load(self.input_path)
            metrics = QualityMetrics(loader.con).calculate_dataset_metrics(
                raw, dataset_name=self.input_path, rows_dropped=loader.rows_dropped
            )

            observations = compute_derived_columns(raw)
            decades = summarize_by_decade(observations)
            top_peak = top_by_peak_population(observations, self.top_peak_n)
            top_peak_series = filter_countries(
                observations, [s.country for s in top_peak]
            )
            top_average = top_by_average_population(observations, self.top_average_n)
            world_series = [
                obs for obs in observations if obs.country == config.WORLD_ENTITY
            ]
            if not world_series:
                logger.warning(f"No '{config.WORLD_ENTITY}' rows found in {self.input_path}")

        except PopReportBaseError as e:
            log_exception(logger, e, {"context": "Report build", "input": self.input_path})
            raise
        finally:
            loader.close()

        logger.info(
            f"✅ Report tables built: {len(observations)} observations, "
            f"{len(decades)} decades in {time.time() - start_time:.2f}s"
        )
        return ReportTables(
            observations=observations,
            decades=decades,
            top_peak=top_peak,
            top_peak_series=top_peak_series,
            top_average=top_average,
            world_series=world_series,
            metrics=metrics,
        )

    def export(self, tables: ReportTables) -> Dict[str, str]:
        """Write every table as CSV plus the quality metrics as JSON.

        :return: Mapping of product name to written file path
        :raises ExportError: If a file cannot be written
        """
        written = {}
        try:
            os.makedirs(self.output_dir, exist_ok=True)
            for name, frame in tables.frames().items():
                path = os.path.join(self.output_dir, f"{standardize_filename(name)}.csv")
                frame.to_csv(path, index=False)
                written[name] = path
                logger.info(f"💾 Wrote {len(frame)} rows to {path}")

            metrics_path = os.path.join(self.output_dir, "quality_metrics.json")
            QualityMetrics.export_metrics_json(tables.metrics, metrics_path)
            written["quality_metrics"] = metrics_path
        except OSError as e:
            log_exception(logger, e, {"context": "Report export", "output": self.output_dir})
            raise ExportError(f"Unable to write report tables to {self.output_dir}: {e}")
        return written

    def print_summary(self, tables: ReportTables) -> None:
        """Log the summary tables to the console."""
        frames = tables.frames()
        for name in ("decade_summary", "top_peak", "top_average"):
            logger.info(f"=== {name} ===\n{frames[name].to_string(index=False)}")
        if tables.world_series:
            last = tables.world_series[-1]
            logger.info(
                f"{config.WORLD_ENTITY} index in {last.year}: {last.pop_index:.1f}"
            )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Prepare population report tables from a population estimates CSV."
    )
    parser.add_argument(
        "--input",
        default=None,
        help="Path to the population CSV (default: POPULATION_CSV)",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for exported tables (default: OUTPUT_DIR)",
    )
    parser.add_argument(
        "--top-peak",
        type=int,
        default=None,
        help="Number of countries ranked by peak population (default: TOP_PEAK_N)",
    )
    parser.add_argument(
        "--top-average",
        type=int,
        default=None,
        help="Number of countries ranked by average population (default: TOP_AVERAGE_N)",
    )
    parser.add_argument(
        "--format",
        choices=["console", "csv"],
        default="console",
        help="Print the summary tables or export all tables as CSV",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        report = Report(
            input_path=args.input,
            output_dir=args.output_dir,
            top_peak_n=args.top_peak,
            top_average_n=args.top_average,
        )
        tables = report.build()
        if args.format == "csv":
            report.export(tables)
        else:
            report.print_summary(tables)
    except (PopReportBaseError, ValueError) as e:
        logger.error(f"Report generation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
