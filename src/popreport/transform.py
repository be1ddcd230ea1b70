"""Derived per-country columns: year-over-year growth rate and base-year index.

Each country's observations are sorted by year and walked in order.
``growth_rate`` compares a year with the one before it in the same
country; ``pop_index`` scales population to the country's first year.
"""

import math
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from popreport.exceptions import SchemaViolation
from popreport.logging_config import create_logger
from popreport.models import Observation

logger = create_logger(__name__)

BASE_INDEX = 100.0


def group_by_country(
    observations: Iterable[Observation],
) -> List[Tuple[str, List[Observation]]]:
    """Group observations by country, keeping first-seen country order.

    :param observations: Observations in any order
    :return: List of (country, observations) pairs
    """
    positions: Dict[str, int] = {}
    groups: List[Tuple[str, List[Observation]]] = []
    for obs in observations:
        if obs.country not in positions:
            positions[obs.country] = len(groups)
            groups.append((obs.country, []))
        groups[positions[obs.country]][1].append(obs)
    return groups


def sort_by_year(country: str, rows: List[Observation]) -> List[Observation]:
    """Sort one country's rows by year, rejecting duplicate years.

    :raises SchemaViolation: If the same year appears twice
    """
    ordered = sorted(rows, key=lambda obs: obs.year)
    for i in range(1, len(ordered)):
        if ordered[i].year == ordered[i - 1].year:
            raise SchemaViolation(
                f"Duplicate observation for ({country!r}, {ordered[i].year})",
                country=country,
                year=ordered[i].year,
            )
    return ordered


def percent_change(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``; nan on a zero base."""
    if previous == 0:
        return math.nan
    return (current - previous) / previous * 100


def population_index(population: float, base: float) -> float:
    """Population relative to ``base`` scaled so the base equals 100."""
    if base == 0:
        return math.nan
    return population / base * 100


def compute_derived_columns(observations: Iterable[Observation]) -> List[Observation]:
    """Populate growth_rate and pop_index for every observation.

    The result is grouped by country (first-seen order) and chronological
    within each country. Zero-population denominators yield ``nan``.

    :param observations: Raw observations from the loader
    :return: New Observation records with all five fields set
    :raises SchemaViolation: On a duplicate (country, year) pair
    """
    result: List[Observation] = []
    anomalies = 0
    single_year = 0

    for country, rows in group_by_country(observations):
        ordered = sort_by_year(country, rows)
        base = ordered[0].population
        if len(ordered) == 1:
            single_year += 1

        for i in range(len(ordered)):
            obs = ordered[i]
            growth: Optional[float] = None
            if i == 0:
                index = BASE_INDEX
            else:
                growth = percent_change(obs.population, ordered[i - 1].population)
                index = population_index(obs.population, base)
                if math.isnan(growth) or math.isnan(index):
                    anomalies += 1
            result.append(replace(obs, growth_rate=growth, pop_index=index))

    if anomalies:
        logger.warning(
            f"{anomalies} observations follow a zero population; growth_rate set to nan"
        )
    if single_year:
        logger.debug(f"{single_year} countries have a single observation and no growth rate")

    logger.info(f"Derived growth_rate and pop_index for {len(result)} observations")
    return result
