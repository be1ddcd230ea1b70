"""Decade bucketing of the transformed observation table."""

from typing import Dict, Iterable, List

from popreport.logging_config import create_logger
from popreport.models import DecadeSummary, Observation
from popreport.utils import mean_defined

logger = create_logger(__name__)


def decade_of(year: int) -> int:
    """Return the decade bucket of a year, e.g. 1965 -> 1960."""
    return year // 10 * 10


def summarize_by_decade(observations: Iterable[Observation]) -> List[DecadeSummary]:
    """Mean population and mean growth rate per decade.

    Every row contributes, aggregate entities such as "World" included.
    Missing values are skipped independently for each mean.

    :param observations: Transformed observations
    :return: One DecadeSummary per decade present, ascending by decade
    """
    buckets: Dict[int, List[Observation]] = {}
    for obs in observations:
        buckets.setdefault(decade_of(obs.year), []).append(obs)

    summaries = []
    for decade in sorted(buckets):
        rows = buckets[decade]
        summaries.append(
            DecadeSummary(
                decade=decade,
                mean_population=mean_defined(obs.population for obs in rows),
                mean_growth_rate=mean_defined(obs.growth_rate for obs in rows),
                row_count=len(rows),
            )
        )

    logger.info(f"Summarized {len(summaries)} decades")
    return summaries
