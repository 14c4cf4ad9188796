"""Unit tests for Chart.js payload construction."""

from __future__ import annotations

import pytest
from pytest import approx

from analysis.engine import analyze_question
from analysis.questions import QuestionInput
from core.charts import PALETTE, question_chart

pytestmark = pytest.mark.unit

GRID = QuestionInput(
    id=1,
    text="Rate each area",
    question_type="multipleChoiceGrid",
    rows=("Speed", "Quality"),
    columns=("Low", "High"),
    answers=('[{"rowIndex": 0, "selections": 1}, {"rowIndex": 1, "selections": 0}]',) * 2,
)


def test_choice_frequency_chart() -> None:
    """Non-grid questions chart their frequency table."""

    analysis = analyze_question(
        QuestionInput(
            id=2,
            text="Which team?",
            question_type="multipleChoice",
            options=("Red", "Blue", "Green"),
            answers=("Red", "Red", "Blue", "Purple"),
        )
    )

    chart = question_chart(analysis, "pie")

    assert chart["labels"] == ["Red", "Blue", "Green", "Purple"]
    assert chart["datasets"][0]["data"] == [2, 1, 0, 1]


def test_grid_bar_chart_has_one_dataset_per_row() -> None:
    """Bar, line and radar grid charts show each row as a dataset."""

    chart = question_chart(analyze_question(GRID), "bar")

    assert chart["labels"] == ["Low", "High"]
    assert [dataset["label"] for dataset in chart["datasets"]] == ["Speed", "Quality"]
    assert chart["datasets"][0]["data"] == [0, 2]
    assert chart["datasets"][1]["backgroundColor"] == PALETTE[1]


def test_grid_radial_chart_uses_column_totals() -> None:
    """Pie-style grid charts combine rows into column totals."""

    chart = question_chart(analyze_question(GRID), "polarArea")

    assert len(chart["datasets"]) == 1
    assert chart["datasets"][0]["label"] == "Rate each area"
    assert chart["datasets"][0]["data"] == [2, 2]


def test_grid_scatter_chart_is_empty() -> None:
    """Grid data has no scatter representation."""

    assert question_chart(analyze_question(GRID), "scatter") == {"labels": [], "datasets": []}


def test_numeric_scatter_chart_includes_trend_line() -> None:
    """Scatter charts of numeric questions pair points with the fitted line."""

    analysis = analyze_question(QuestionInput(id=3, text="Score", question_type="rating", answers=("1", "2", "3")))

    chart = question_chart(analysis, "scatter")

    points, trend = chart["datasets"]
    assert points["type"] == "scatter"
    assert points["data"] == [{"x": 1.0, "y": 1.0}, {"x": 2.0, "y": 2.0}, {"x": 3.0, "y": 3.0}]
    assert trend["type"] == "line"
    assert [point["y"] for point in trend["data"]] == [approx(1.0), approx(2.0), approx(3.0)]


def test_numeric_scatter_without_trend_is_empty() -> None:
    """Fewer than three values cannot be charted as a trend."""

    analysis = analyze_question(QuestionInput(id=3, text="Score", question_type="rating", answers=("1", "2")))

    assert question_chart(analysis, "scatter") == {"labels": [], "datasets": []}


def test_unknown_chart_type_falls_back_to_bar() -> None:
    """Unsupported chart types render as bar data."""

    analysis = analyze_question(QuestionInput(id=3, text="Score", question_type="rating", answers=("1", "2")))

    chart = question_chart(analysis, "bubble")

    assert chart["labels"] == ["1", "2"]
    assert chart["datasets"][0]["data"] == [1, 1]
