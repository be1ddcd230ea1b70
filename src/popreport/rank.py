"""Country rankings by peak and by average population.

The aggregate "World" entity is removed before ranking by exact,
case-sensitive match on its label. Rankings sort by the ranking value
descending and then by country name, so the selection does not depend
on input row order.
"""

import math
from typing import Iterable, List

from popreport.config import WORLD_ENTITY
from popreport.logging_config import create_logger
from popreport.models import CountrySummary, Observation
from popreport.transform import group_by_country
from popreport.utils import is_missing, max_defined, mean_defined

logger = create_logger(__name__)

DEFAULT_PEAK_N = 5
DEFAULT_AVERAGE_N = 10


def exclude_world(
    observations: Iterable[Observation], world: str = WORLD_ENTITY
) -> List[Observation]:
    """Drop the rows labelled exactly ``world``."""
    return [obs for obs in observations if obs.country != world]


def summarize_countries(observations: Iterable[Observation]) -> List[CountrySummary]:
    """One CountrySummary per country, in first-seen order.

    The "World" rows are excluded before summarizing.
    """
    summaries = []
    for country, rows in group_by_country(exclude_world(observations)):
        populations = [obs.population for obs in rows]
        summaries.append(
            CountrySummary(
                country=country,
                max_population=max_defined(populations),
                mean_population=mean_defined(populations),
                mean_growth_rate=mean_defined(obs.growth_rate for obs in rows),
                year_count=len(rows),
            )
        )
    return summaries


def _take_top(summaries: List[CountrySummary], n: int, key) -> List[CountrySummary]:
    if n < 0:
        raise ValueError(f"n must not be negative, got {n}")

    def sort_key(summary):
        value = key(summary)
        # missing values rank last
        return (math.inf if is_missing(value) else -value, summary.country)

    return sorted(summaries, key=sort_key)[:n]


def top_by_peak_population(
    observations: Iterable[Observation], n: int = DEFAULT_PEAK_N
) -> List[CountrySummary]:
    """The ``n`` countries with the largest maximum population, descending.

    :param observations: Transformed observations
    :param n: Number of countries to keep
    :return: At most ``n`` CountrySummary rows
    :raises ValueError: If ``n`` is negative
    """
    top = _take_top(summarize_countries(observations), n, lambda s: s.max_population)
    logger.info(f"Top {n} by peak population: {[s.country for s in top]}")
    return top


def top_by_average_population(
    observations: Iterable[Observation], n: int = DEFAULT_AVERAGE_N
) -> List[CountrySummary]:
    """The ``n`` countries with the largest mean population, descending.

    :param observations: Transformed observations
    :param n: Number of countries to keep
    :return: At most ``n`` CountrySummary rows
    :raises ValueError: If ``n`` is negative
    """
    top = _take_top(summarize_countries(observations), n, lambda s: s.mean_population)
    logger.info(f"Top {n} by average population: {[s.country for s in top]}")
    return top


def filter_countries(
    observations: Iterable[Observation], countries: Iterable[str]
) -> List[Observation]:
    """Keep the full time series of the given countries."""
    wanted = set(countries)
    return [obs for obs in observations if obs.country in wanted]
