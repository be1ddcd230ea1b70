"""Configuration module for project settings and environment variables.

This module manages configuration settings for the population report
pipeline. Values are read from the environment, with a local ``.env``
file loaded first when present.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from popreport.exceptions import ConfigurationError
from popreport.logging_config import create_logger

# Load .env on host only; don't override variables already set
load_dotenv(override=False)

logger = create_logger(__name__)

# get the local root directory
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

DATA_DIR = os.path.join(ROOT_DIR, "data")
POPULATION_CSV = os.getenv(
    "POPULATION_CSV", os.path.join(DATA_DIR, "population.csv")
)
OUTPUT_DIR = os.getenv("OUTPUT_DIR", os.path.join(ROOT_DIR, "output"))

# Raw strings are kept so validate_config can report the offending value
TOP_PEAK_N_RAW = os.getenv("TOP_PEAK_N", "5")
TOP_AVERAGE_N_RAW = os.getenv("TOP_AVERAGE_N", "10")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None

# Source file schema
ENTITY_COLUMN = "Entity"
YEAR_COLUMN = "Year"
POPULATION_COLUMN = "Population - Sex: all - Age: all - Variant: estimates"

# logical name -> physical source column
SOURCE_COLUMNS = {
    "country": ENTITY_COLUMN,
    "year": YEAR_COLUMN,
    "population": POPULATION_COLUMN,
}

# Aggregate row excluded from country rankings (exact, case-sensitive)
WORLD_ENTITY = "World"


def parse_top_n(name: str, raw: str) -> int:
    """Parse a top-N size, rejecting non-integers and negatives.

    :param name: Setting name used in the error message
    :param raw: Raw string value
    :return: Parsed non-negative integer
    :raises ConfigurationError: If the value is not a non-negative integer
    """
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {value}")
    return value


def validate_config(
    population_csv: Optional[str] = None,
    output_dir: Optional[str] = None,
    top_peak_n: Optional[int] = None,
    top_average_n: Optional[int] = None,
) -> dict:
    """
    Validate configuration parameters and return the parsed settings.

    Values passed in take precedence over the environment, and the
    environment settings they replace are not checked. No directories
    are created here; the output directory is made on export.

    :param population_csv: Input path overriding POPULATION_CSV
    :param output_dir: Output directory overriding OUTPUT_DIR
    :param top_peak_n: Top-N size overriding TOP_PEAK_N
    :param top_average_n: Top-N size overriding TOP_AVERAGE_N
    :return: Dictionary of validated settings
    :raises ConfigurationError: If configuration is invalid
    """
    if top_peak_n is None:
        top_peak_n = parse_top_n("TOP_PEAK_N", TOP_PEAK_N_RAW)
    if top_average_n is None:
        top_average_n = parse_top_n("TOP_AVERAGE_N", TOP_AVERAGE_N_RAW)

    if not isinstance(logging.getLevelName(LOG_LEVEL), int):
        raise ConfigurationError(f"Unknown LOG_LEVEL: {LOG_LEVEL}")

    population_csv = population_csv or POPULATION_CSV
    if not population_csv:
        raise ConfigurationError("Input path (POPULATION_CSV) is not configured")

    output_dir = output_dir or OUTPUT_DIR
    if not output_dir:
        raise ConfigurationError("Output directory (OUTPUT_DIR) is not configured")

    logger.info("Configuration validation successful")

    return {
        "population_csv": population_csv,
        "output_dir": output_dir,
        "top_peak_n": top_peak_n,
        "top_average_n": top_average_n,
        "log_level": LOG_LEVEL,
        "log_dir": LOG_DIR,
    }
