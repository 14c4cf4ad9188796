"""Unit tests for descriptive statistics."""

from __future__ import annotations

import math

import pytest
from pytest import approx

from analysis.summary import frequency_distribution, median, mode, summary_statistics

pytestmark = pytest.mark.unit


def test_summary_statistics_uses_population_variance() -> None:
    """Variance divides by n, not n - 1."""

    stats = summary_statistics([1, 2, 2, 3, 4])

    assert stats.count == 5
    assert stats.mean == approx(2.4)
    assert stats.median == 2
    assert stats.mode == (2.0,)
    assert stats.min == 1
    assert stats.max == 4
    assert stats.variance == approx(1.04)
    assert stats.std_dev == approx(math.sqrt(1.04))


def test_summary_statistics_of_empty_input() -> None:
    """Empty input yields zeros and None placeholders."""

    stats = summary_statistics([])

    assert stats.count == 0
    assert stats.mean == 0
    assert stats.median == 0
    assert stats.mode is None
    assert stats.min is None
    assert stats.max is None
    assert stats.variance == 0
    assert stats.std_dev == 0


def test_median_of_even_count_averages_middle_values() -> None:
    """Even-length input uses the mean of the two middle values."""

    assert median([4, 1, 3, 2]) == 2.5
    assert median([5, 1, 3]) == 3


def test_mode_orders_ties_by_when_they_reached_the_top_frequency() -> None:
    """Tied values are reported in the order they became most frequent."""

    assert mode([1, 1, 2, 2, 3]) == (1, 2)
    assert mode([1, 2, 2, 1]) == (2, 1)
    assert mode([3, 5, 5]) == (5,)


def test_mode_is_none_when_all_values_are_distinct() -> None:
    """Distinct values have no mode."""

    assert mode([1, 2, 3]) is None


def test_frequency_distribution_labels_whole_floats_without_decimals() -> None:
    """Counts keep first-seen order and readable labels."""

    counts = frequency_distribution([4.0, 2.0, 4.0, 3.5])

    assert counts == {"4": 2, "2": 1, "3.5": 1}
    assert list(counts) == ["4", "2", "3.5"]
