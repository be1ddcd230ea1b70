"""Unit tests for top-N country selection."""

import math
import random

import pytest

from popreport.models import Observation
from popreport.rank import (
    exclude_world,
    filter_countries,
    summarize_countries,
    top_by_average_population,
    top_by_peak_population,
)


def obs(country, year, population, growth=None):
    return Observation(country=country, year=year, population=float(population),
                       growth_rate=growth, pop_index=None)


@pytest.mark.unit
class TestExcludeWorld:
    """Test removal of the World aggregate."""

    def test_exact_match_removed(self):
        rows = [obs("World", 1950, 10), obs("Chad", 1950, 1)]

        assert [o.country for o in exclude_world(rows)] == ["Chad"]

    def test_match_is_case_sensitive(self):
        """Test only the exact label is excluded."""
        rows = [obs("world", 1950, 10), obs("WORLD", 1950, 10), obs("World ", 1950, 10)]

        assert len(exclude_world(rows)) == 3

    def test_summaries_never_contain_world(self, transformed_observations):
        summaries = summarize_countries(transformed_observations)

        assert "World" not in [s.country for s in summaries]
        assert len(summaries) == 7


@pytest.mark.unit
class TestTopByPeakPopulation:
    """Test ranking by maximum population."""

    def test_top_five(self, transformed_observations):
        top = top_by_peak_population(transformed_observations)

        assert [s.country for s in top] == ["India", "China", "Brazil", "Nigeria", "Japan"]
        assert top[0].max_population == 1_430_000_000.0

    def test_order_invariant(self, transformed_observations):
        """Test the selected set does not depend on input row order."""
        shuffled = list(transformed_observations)
        random.Random(11).shuffle(shuffled)

        expected = {s.country for s in top_by_peak_population(transformed_observations, 5)}
        assert {s.country for s in top_by_peak_population(shuffled, 5)} == expected

    def test_ties_broken_by_country_name(self):
        rows = [obs("Zeta", 2000, 50), obs("Alpha", 2000, 50), obs("Mid", 2000, 10)]

        top = top_by_peak_population(rows, 2)

        assert [s.country for s in top] == ["Alpha", "Zeta"]

    def test_fewer_countries_than_n(self):
        rows = [obs("A", 2000, 3), obs("B", 2000, 4)]

        assert [s.country for s in top_by_peak_population(rows, 5)] == ["B", "A"]

    def test_zero_n_gives_empty(self, transformed_observations):
        assert top_by_peak_population(transformed_observations, 0) == []

    def test_negative_n_raises(self, transformed_observations):
        with pytest.raises(ValueError):
            top_by_peak_population(transformed_observations, -1)

    def test_missing_population_does_not_depend_on_order(self):
        """Test a nan population is skipped when taking a country's peak."""
        rows = [obs("Big", 1950, math.nan), obs("Big", 1960, 900),
                obs("Small", 1950, 10), obs("Small", 1960, 20)]

        forward = top_by_peak_population(rows, 1)
        backward = top_by_peak_population(list(reversed(rows)), 1)

        assert [s.country for s in forward] == ["Big"]
        assert [s.country for s in backward] == ["Big"]
        assert forward[0].max_population == 900.0

    def test_world_only_input_gives_empty(self):
        assert top_by_peak_population([obs("World", 2000, 8_000_000_000)]) == []


@pytest.mark.unit
class TestTopByAveragePopulation:
    """Test ranking by mean population."""

    def test_average_ranking(self, transformed_observations):
        top = top_by_average_population(transformed_observations, 10)

        assert [s.country for s in top] == [
            "China", "India", "Brazil", "Japan", "Nigeria", "Iceland",
        ]
        assert top[0].mean_population == pytest.approx((540e6 + 660e6 + 1420e6) / 3)
        assert all(s.country != "World" for s in top)

    def test_mean_growth_excludes_nulls(self):
        rows = [obs("A", 1950, 100, None), obs("A", 1951, 110, 10.0), obs("A", 1952, 132, 20.0)]

        (summary,) = top_by_average_population(rows, 1)

        assert summary.mean_growth_rate == pytest.approx(15.0)
        assert summary.year_count == 3

    def test_mean_growth_excludes_nan(self):
        rows = [obs("A", 1950, 0, None), obs("A", 1951, 110, math.nan), obs("A", 1952, 132, 20.0)]

        (summary,) = top_by_average_population(rows, 1)

        assert summary.mean_growth_rate == pytest.approx(20.0)

    def test_single_year_country_has_no_growth_mean(self):
        (summary,) = top_by_average_population([obs("Niue", 2000, 1600)], 1)

        assert summary.mean_growth_rate is None


@pytest.mark.unit
class TestPeakSeries:
    """Test filtering of the full time series for charting."""

    def test_series_contains_full_history(self, transformed_observations):
        top = top_by_peak_population(transformed_observations, 2)
        series = filter_countries(transformed_observations, [s.country for s in top])

        assert {o.country for o in series} == {"India", "China"}
        assert len(series) == 6

    def test_filter_countries_keeps_order(self):
        rows = [obs("A", 1, 1), obs("B", 1, 1), obs("A", 2, 1)]

        assert filter_countries(rows, ["A"]) == [rows[0], rows[2]]
