"""Chart.js payloads for the survey analysis page.

Payloads are built from analysis DTOs only; rendering happens client-side.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TypedDict

from analysis.dto import GridAnalysis, QuestionAnalysis

PALETTE: tuple[str, ...] = (
    "rgba(75, 192, 192, 0.6)",
    "rgba(255, 99, 132, 0.6)",
    "rgba(54, 162, 235, 0.6)",
    "rgba(255, 206, 86, 0.6)",
    "rgba(153, 102, 255, 0.6)",
    "rgba(255, 159, 64, 0.6)",
)
BORDER_COLOR = "rgba(0, 0, 0, 0.1)"
POINT_COLOR = "#EF4444"
TREND_COLOR = "#3B82F6"


class ChartType(StrEnum):
    """Chart.js chart types offered on the analysis page."""

    bar = "bar"
    line = "line"
    pie = "pie"
    doughnut = "doughnut"
    radar = "radar"
    polar_area = "polarArea"
    scatter = "scatter"


RADIAL_TYPES: frozenset[ChartType] = frozenset({ChartType.pie, ChartType.doughnut, ChartType.polar_area})


class ChartPoint(TypedDict):
    """A single x/y point for scatter and trend datasets."""

    x: float
    y: float | None


class ChartDataset(TypedDict, total=False):
    """A Chart.js dataset payload."""

    type: str
    label: str
    data: list[int] | list[float] | list[ChartPoint]
    backgroundColor: str | list[str]
    borderColor: str
    borderWidth: int
    tension: float


class ChartData(TypedDict):
    """The full Chart.js payload (labels + datasets) for a chart panel."""

    labels: list[str]
    datasets: list[ChartDataset]


def empty_chart() -> ChartData:
    """Return a payload with no labels and no datasets."""

    return {"labels": [], "datasets": []}


def question_chart(question: QuestionAnalysis, chart_type: str = ChartType.bar) -> ChartData:
    """Build the chart payload for a question and requested chart type.

    Args:
        question: Analysis of the question.
        chart_type: A `ChartType` value. Unknown values fall back to bar.

    Returns:
        Chart.js payload. Scatter charts of numeric questions show the
        regression trend; grid questions use the grid layouts.
    """

    try:
        kind = ChartType(chart_type)
    except ValueError:
        kind = ChartType.bar

    if question.grid is not None:
        return grid_chart(question.grid, kind, label=question.question_text)
    if kind is ChartType.scatter:
        return regression_chart(question)
    return frequency_chart(_frequencies(question))


def frequency_chart(frequencies: dict[str, int], *, label: str = "Responses") -> ChartData:
    """Build a single-dataset frequency chart."""

    return {
        "labels": list(frequencies),
        "datasets": [
            {
                "label": label,
                "data": list(frequencies.values()),
                "backgroundColor": list(PALETTE),
                "borderColor": BORDER_COLOR,
                "borderWidth": 2,
            }
        ],
    }


def grid_chart(grid: GridAnalysis, chart_type: ChartType, *, label: str = "Grid Results") -> ChartData:
    """Build a grid chart payload.

    Radial charts get one dataset of column totals. Scatter has no meaningful
    grid layout and returns an empty payload. Other types get one dataset per
    row.
    """

    if chart_type is ChartType.scatter:
        return empty_chart()
    if chart_type in RADIAL_TYPES:
        return {
            "labels": list(grid.columns),
            "datasets": [
                {
                    "label": label,
                    "data": list(grid.column_totals),
                    "backgroundColor": list(PALETTE),
                }
            ],
        }
    return {
        "labels": list(grid.columns),
        "datasets": [
            {
                "label": row_label,
                "data": list(grid.counts[index]),
                "backgroundColor": PALETTE[index % len(PALETTE)],
            }
            for index, row_label in enumerate(grid.rows)
        ],
    }


def regression_chart(question: QuestionAnalysis) -> ChartData:
    """Build a scatter of numeric answers with the fitted trend line."""

    numeric = question.numeric
    if numeric is None or numeric.trend is None:
        return empty_chart()

    regression = numeric.trend.regression
    points: list[ChartPoint] = [{"x": float(order), "y": value} for order, value in numeric.trend.points]
    datasets: list[ChartDataset] = [
        {"type": "scatter", "label": "Responses", "data": points, "backgroundColor": POINT_COLOR},
    ]
    if regression.slope is not None:
        datasets.append(
            {
                "type": "line",
                "label": "Trend",
                "data": [{"x": point["x"], "y": regression.predict(point["x"])} for point in points],
                "borderColor": TREND_COLOR,
                "borderWidth": 2,
                "tension": 0.1,
            }
        )
    return {"labels": [], "datasets": datasets}


def _frequencies(question: QuestionAnalysis) -> dict[str, int]:
    """Return the frequency mapping shown for a non-grid question."""

    if question.numeric is not None:
        return question.numeric.frequencies
    if question.choice is not None:
        return question.choice.frequencies
    if question.text is not None:
        return dict(question.text.top_keywords)
    return {}
