"""Unit tests for question data quality scoring."""

from __future__ import annotations

import pytest

from analysis.quality import ZERO_VARIANCE_MESSAGE, assess_quality
from analysis.questions import QuestionInput

pytestmark = pytest.mark.unit


def _question(question_type: str, answers: list[str], **kwargs) -> QuestionInput:
    return QuestionInput(id=1, text="Q", question_type=question_type, answers=tuple(answers), **kwargs)


def test_varied_numeric_answers_pass_every_check() -> None:
    """Ten varied ratings are valid with a perfect score."""

    quality = assess_quality(_question("rating", ["1", "2", "3", "4", "5"] * 2))

    assert quality.is_valid is True
    assert quality.score == 100
    assert quality.errors == ()
    assert quality.response_count == 10
    assert quality.usable_count == 10


def test_too_few_responses_halves_the_score() -> None:
    """Fewer than ten answers fails the response-count check."""

    quality = assess_quality(_question("rating", ["3", "4", "5"]))

    assert quality.is_valid is False
    assert quality.errors == ("Insufficient responses (3/10)",)
    assert quality.score == 50


def test_constant_answers_fail_variance_check() -> None:
    """A single repeated value has zero variance."""

    quality = assess_quality(_question("rating", ["4"] * 10))

    assert quality.errors == (ZERO_VARIANCE_MESSAGE,)
    assert quality.score == 40


def test_unknown_options_are_not_usable() -> None:
    """Choice answers outside the declared options do not count as data."""

    quality = assess_quality(_question("multipleChoice", ["Purple"] * 10, options=("Red", "Blue")))

    assert quality.errors == ("No valid option selections",)
    assert quality.score == 30
    assert quality.response_count == 10
    assert quality.usable_count == 0


def test_blank_answers_fail_both_checks() -> None:
    """Only blank answers fail the response-count and validity checks."""

    quality = assess_quality(_question("rating", ["", ""]))

    assert quality.errors == ("Insufficient responses (0/10)", "No valid numerical data")
    assert quality.score == 15


def test_identical_text_answers_have_no_variance_check() -> None:
    """Free text is not checked for variance."""

    quality = assess_quality(_question("paragraph", ["Looks good"] * 10))

    assert quality.is_valid is True
    assert quality.score == 100


def test_grid_with_single_column_chosen_has_zero_variance() -> None:
    """Grid variance counts distinct chosen columns."""

    answer = '[{"rowIndex": 0, "selections": 0}, {"rowIndex": 1, "selections": 0}]'
    quality = assess_quality(
        _question("multipleChoiceGrid", [answer] * 10, rows=("A", "B"), columns=("Low", "High"))
    )

    assert quality.errors == (ZERO_VARIANCE_MESSAGE,)
    assert quality.usable_count == 20


def test_dropdown_labels_that_look_like_json_are_usable() -> None:
    """Bracketed dropdown labels count as selections and vary normally."""

    result = assess_quality(_question("dropdown", ["[1]"] * 6 + ["B"] * 6, options=("[1]", "B")))

    assert result.is_valid is True
    assert result.usable_count == 12
    assert result.errors == ()
