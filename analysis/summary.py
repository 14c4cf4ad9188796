"""Descriptive statistics for numeric survey answers."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SummaryStatistics:
    """Descriptive statistics for a set of numeric answers.

    Attributes:
        count: Number of numeric values.
        mean: Arithmetic mean (0 for empty input).
        median: Median (0 for empty input).
        mode: Most frequent values in the order they became most frequent, or
            None when every value is distinct.
        min: Smallest value, or None for empty input.
        max: Largest value, or None for empty input.
        variance: Population variance (0 for empty input).
        std_dev: Population standard deviation (0 for empty input).
    """

    count: int
    mean: float
    median: float
    mode: tuple[float, ...] | None
    min: float | None
    max: float | None
    variance: float
    std_dev: float


def summary_statistics(values: Iterable[float]) -> SummaryStatistics:
    """Compute descriptive statistics for numeric values.

    Args:
        values: Numeric answers. Callers filter out non-numeric answers first
            (see `analysis.answers.parse_numeric`).

    Returns:
        SummaryStatistics. Empty input returns zeros and None placeholders
        instead of raising.
    """

    data = [float(v) for v in values]
    if not data:
        return SummaryStatistics(
            count=0,
            mean=0.0,
            median=0.0,
            mode=None,
            min=None,
            max=None,
            variance=0.0,
            std_dev=0.0,
        )

    count = len(data)
    mean = sum(data) / count
    variance = sum((value - mean) ** 2 for value in data) / count
    return SummaryStatistics(
        count=count,
        mean=mean,
        median=median(data),
        mode=mode(data),
        min=min(data),
        max=max(data),
        variance=variance,
        std_dev=math.sqrt(variance),
    )


def median(values: Sequence[float]) -> float:
    """Return the median of a non-empty sequence."""

    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def mode(values: Sequence[float]) -> tuple[float, ...] | None:
    """Return the most frequent values.

    Ties are kept in the order each value reached the top frequency. When the
    tie covers every value (all values distinct), there is no mode.
    """

    frequency: dict[float, int] = {}
    modes: list[float] = []
    top = 0
    for value in values:
        frequency[value] = frequency.get(value, 0) + 1
        if frequency[value] > top:
            top = frequency[value]
            modes = [value]
        elif frequency[value] == top and value not in modes:
            modes.append(value)
    if len(modes) == len(values):
        return None
    return tuple(modes)


def frequency_distribution(values: Iterable[object]) -> dict[str, int]:
    """Count occurrences of each value in first-seen order.

    Args:
        values: Answer values (numbers or strings).

    Returns:
        Mapping of display label -> count. Whole floats are labelled without a
        decimal part (`4.0` -> `"4"`).
    """

    counts: dict[str, int] = {}
    for value in values:
        label = value_label(value)
        counts[label] = counts.get(label, 0) + 1
    return counts


def value_label(value: object) -> str:
    """Return a stable display label for an answer value."""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
