"""Record types shared by the loader, transformer and selectors."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Observation:
    """One (country, year) row of the population table.

    ``growth_rate`` and ``pop_index`` stay ``None`` until the transformer
    has run; a ``nan`` value marks a zero-population denominator.
    """

    country: str
    year: int
    population: float
    growth_rate: Optional[float] = None
    pop_index: Optional[float] = None


@dataclass(frozen=True)
class DecadeSummary:
    """Mean population and growth rate over one decade bucket."""

    decade: int
    mean_population: Optional[float]
    mean_growth_rate: Optional[float]
    row_count: int


@dataclass(frozen=True)
class CountrySummary:
    """Per-country statistics used for top-N rankings."""

    country: str
    max_population: Optional[float]
    mean_population: Optional[float]
    mean_growth_rate: Optional[float]
    year_count: int
