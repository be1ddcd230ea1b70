"""Pytest configuration and shared fixtures for the population report tests.

This module provides fixtures for:
- Sample population tables in the source CSV layout
- Temporary CSV files and directories
- Observation records at each pipeline stage
- Configuration isolation
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator, List
from unittest.mock import MagicMock

import pandas as pd
import pytest

from popreport.config import ENTITY_COLUMN, POPULATION_COLUMN, YEAR_COLUMN
from popreport.models import Observation


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_output_dir(tmp_path, monkeypatch) -> Path:
    """Point OUTPUT_DIR at a temporary directory for every test."""
    output_dir = tmp_path / "output"
    monkeypatch.setattr("popreport.config.OUTPUT_DIR", str(output_dir))
    monkeypatch.setattr("popreport.config.LOG_DIR", None)
    return output_dir


# ============================================================================
# Test Data Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def sample_population_data() -> pd.DataFrame:
    """Generate a small population table in the source CSV layout.

    World triples between 1950 and 2020; India overtakes China in 2020.

    Returns:
        Pandas DataFrame with test data
    """
    rows = [
        ("World", "OWID_WRL", 1950, 2_500_000_000),
        ("World", "OWID_WRL", 1960, 3_000_000_000),
        ("World", "OWID_WRL", 2020, 7_500_000_000),
        ("China", "CHN", 1950, 540_000_000),
        ("China", "CHN", 1960, 660_000_000),
        ("China", "CHN", 2020, 1_420_000_000),
        ("India", "IND", 1950, 350_000_000),
        ("India", "IND", 1960, 440_000_000),
        ("India", "IND", 2020, 1_430_000_000),
        ("Nigeria", "NGA", 1950, 37_000_000),
        ("Nigeria", "NGA", 1960, 45_000_000),
        ("Nigeria", "NGA", 2020, 210_000_000),
        ("Japan", "JPN", 1950, 84_000_000),
        ("Japan", "JPN", 1960, 93_000_000),
        ("Japan", "JPN", 2020, 125_000_000),
        ("Brazil", "BRA", 1950, 53_000_000),
        ("Brazil", "BRA", 1960, 72_000_000),
        ("Brazil", "BRA", 2020, 213_000_000),
        ("Iceland", "ISL", 1950, 143_000),
        ("Iceland", "ISL", 1960, 176_000),
        ("Iceland", "ISL", 2020, 366_000),
    ]
    return pd.DataFrame(
        rows, columns=[ENTITY_COLUMN, "Code", YEAR_COLUMN, POPULATION_COLUMN]
    )


@pytest.fixture(scope="function")
def raw_observations(sample_population_data: pd.DataFrame) -> List[Observation]:
    """Observations as the loader would return them for the sample table."""
    return [
        Observation(country=row[ENTITY_COLUMN], year=int(row[YEAR_COLUMN]),
                    population=float(row[POPULATION_COLUMN]))
        for _, row in sample_population_data.iterrows()
    ]


@pytest.fixture(scope="function")
def transformed_observations(raw_observations: List[Observation]) -> List[Observation]:
    """Sample observations with growth_rate and pop_index populated."""
    from popreport.transform import compute_derived_columns

    return compute_derived_columns(raw_observations)


# ============================================================================
# Temporary File Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for testing.

    Yields:
        Path to temporary directory
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def make_csv(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a DataFrame to a CSV file in the temp directory.

    Returns:
        Callable taking (frame, name) and returning the CSV path
    """
    def _make_csv(frame: pd.DataFrame, name: str = "population.csv") -> Path:
        csv_path = temp_dir / name
        frame.to_csv(csv_path, index=False)
        return csv_path

    return _make_csv


@pytest.fixture(scope="function")
def temp_csv_file(make_csv, sample_population_data: pd.DataFrame) -> Path:
    """Create a temporary CSV file with the sample population table.

    Returns:
        Path to temporary CSV file
    """
    return make_csv(sample_population_data)


# ============================================================================
# Logging Fixtures
# ============================================================================

@pytest.fixture
def mock_logger():
    """Provide a mock logger for testing.

    Returns:
        Mock logger object
    """
    logger = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.critical = MagicMock()
    return logger
