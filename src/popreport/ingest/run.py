"""Ingest module for the population estimates CSV.

This module reads the raw CSV through DuckDB, maps the source columns
onto the canonical ``country``/``year``/``population`` schema and returns
the rows as Observation records in file order.
"""

import math
import os
from typing import List, Optional, Tuple

import duckdb

from popreport.config import SOURCE_COLUMNS
from popreport.exceptions import LoadError
from popreport.logging_config import create_logger
from popreport.models import Observation

# Initialize logger
logger = create_logger(__name__)


def quote_identifier(name: str) -> str:
    """Quote a column name for DuckDB SQL."""
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    """Quote a string literal for DuckDB SQL."""
    return "'" + value.replace("'", "''") + "'"


class Loader:
    """Load the population estimates file into Observation records.

    The loader owns a DuckDB connection used only for parsing the CSV.
    Rows missing any of the three raw fields, or with a negative or
    non-finite population, are dropped and counted in ``rows_dropped``.
    Entity labels are kept exactly as written in the file.
    """

    def __init__(self, connection: Optional[duckdb.DuckDBPyConnection] = None) -> None:
        self.con = connection if connection else duckdb.connect()
        self.column_mapping = dict(SOURCE_COLUMNS)
        self.rows_loaded = 0
        self.rows_dropped = 0

    def read_header(self, file_path: str) -> List[str]:
        """Return the header columns of the CSV.

        :param file_path: Path to the CSV file
        :return: List of column names in file order
        :raises LoadError: If the file is missing or cannot be parsed
        """
        if not os.path.isfile(file_path):
            raise LoadError(f"Input file not found: {file_path}", path=file_path)
        if not os.access(file_path, os.R_OK):
            raise LoadError(f"Input file is not readable: {file_path}", path=file_path)

        try:
            relation = self.con.sql(
                f"SELECT * FROM read_csv({quote_literal(file_path)}, "
                f"header = true, delim = ',', all_varchar = true)"
            )
            return list(relation.columns)
        except duckdb.Error as e:
            raise LoadError(f"Unable to read {file_path}: {e}", path=file_path)

    def check_columns(self, file_path: str, columns: List[str]) -> None:
        """Ensure every required source column is present.

        :raises LoadError: Naming the first missing column
        """
        for logical, physical in self.column_mapping.items():
            if physical not in columns:
                logger.error(f"Column '{physical}' ({logical}) missing from {file_path}")
                raise LoadError(
                    f"Required column '{physical}' not found in {file_path}",
                    path=file_path,
                    column=physical,
                )

    def fetch_rows(self, file_path: str) -> List[Tuple]:
        """Select and cast the three raw fields, preserving file order."""
        country = quote_identifier(self.column_mapping["country"])
        year = quote_identifier(self.column_mapping["year"])
        population = quote_identifier(self.column_mapping["population"])

        query = f"""
            SELECT
                CASE WHEN TRIM({country}) = '' THEN NULL ELSE {country} END AS country,
                CAST(NULLIF(TRIM({year}), '') AS INTEGER) AS year,
                CAST(NULLIF(TRIM({population}), '') AS DOUBLE) AS population
            FROM read_csv({quote_literal(file_path)}, header = true, delim = ',', all_varchar = true)
        """
        try:
            return self.con.execute(query).fetchall()
        except duckdb.Error as e:
            raise LoadError(f"Unable to parse values in {file_path}: {e}", path=file_path)

    def load(self, file_path) -> List[Observation]:
        """Read the CSV and return raw Observation records.

        :param file_path: Path to the population CSV
        :return: Observations with country, year and population populated
        :raises LoadError: If the file is missing, unreadable or malformed
        """
        file_path = os.fspath(file_path)
        logger.info(f"📥 Loading population estimates from {file_path}")

        columns = self.read_header(file_path)
        self.check_columns(file_path, columns)

        observations: List[Observation] = []
        dropped = 0
        invalid = 0
        for country, year, population in self.fetch_rows(file_path):
            if country is None or year is None or population is None:
                dropped += 1
                continue
            population = float(population)
            if not math.isfinite(population) or population < 0:
                invalid += 1
                continue
            observations.append(
                Observation(country=country, year=int(year), population=population)
            )

        self.rows_loaded = len(observations)
        self.rows_dropped = dropped + invalid
        if dropped:
            logger.warning(f"Dropped {dropped} rows with a missing country, year or population")
        if invalid:
            logger.warning(f"Dropped {invalid} rows with a negative or non-finite population")

        logger.info(f"Loaded {self.rows_loaded} observations from {file_path}")
        return observations

    def close(self) -> None:
        self.con.close()


def load_observations(file_path) -> List[Observation]:
    """Load a population CSV with a short-lived Loader."""
    loader = Loader()
    try:
        return loader.load(file_path)
    finally:
        loader.close()
