"""Unit tests for the AI report prompt."""

from __future__ import annotations

import pytest

from analysis.dto import SurveyAnalysis
from analysis.engine import analyze_survey
from analysis.questions import QuestionInput
from analysis.report import build_report_prompt

pytestmark = pytest.mark.unit


def _analysis() -> SurveyAnalysis:
    return analyze_survey(
        [
            QuestionInput(
                id=1,
                text="How satisfied are you?",
                question_type="rating",
                answers=("1", "2", "3", "4", "5") * 2,
            ),
            QuestionInput(
                id=2,
                text="Which team?",
                question_type="multipleChoice",
                options=("Red", "Blue"),
                answers=("Red", "Blue", "Red"),
            ),
        ]
    )


def test_prompt_lists_dataset_quality_and_sections() -> None:
    """The prompt opens with the title and valid/total question counts."""

    prompt = build_report_prompt("Team pulse", _analysis())

    assert prompt.startswith("## Survey Analysis Report: Team pulse")
    assert "1. **Dataset Quality:** 1/2 valid questions" in prompt
    for heading in ("### Key Findings", "### Statistical Insights", "### Recommendations", "### Conclusion"):
        assert heading in prompt


def test_valid_numeric_question_reports_mean_and_significance() -> None:
    """Valid questions list responses, mean, correlation and quality score."""

    prompt = build_report_prompt("Team pulse", _analysis())

    assert "**Question 1:** How satisfied are you?" in prompt
    assert "- **Responses:** 10" in prompt
    assert "- **Mean:** 3.00" in prompt
    assert "- **Statistical Significance:** No" in prompt
    assert "- **Quality Score:** 100%" in prompt


def test_invalid_question_reports_issues() -> None:
    """Invalid questions list their failed checks instead of statistics."""

    prompt = build_report_prompt("Team pulse", _analysis())

    assert "**Question 2:** Which team?" in prompt
    assert "**Issues:** Insufficient responses (3/10)" in prompt
    assert "**Quality Score:** 50%" in prompt


def test_prompt_for_survey_without_questions() -> None:
    """An empty survey still produces a prompt."""

    prompt = build_report_prompt("Empty", SurveyAnalysis())

    assert "0/0 valid questions" in prompt
    assert "_No questions to analyze._" in prompt
