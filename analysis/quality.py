"""Data quality scoring for survey questions.

Each question starts with a perfect score; every failed check multiplies the
score by its weight. A question is valid for statistical reporting only when
no check fails.
"""

from __future__ import annotations

from dataclasses import dataclass

from .questions import (
    AnswerKind,
    QuestionInput,
    answer_kind,
    non_blank_answers,
    numeric_values,
    selected_options,
    valid_grid_cells,
)

MIN_RESPONSES = 10
MIN_CATEGORIES = 2
MIN_DATA_POINTS = 3

RESPONSE_COUNT_WEIGHT = 0.5
DATA_VALIDITY_WEIGHT = 0.3
VARIANCE_WEIGHT = 0.4

ZERO_VARIANCE_MESSAGE = "Constant values detected (zero variance)"

_NO_DATA_MESSAGES: dict[AnswerKind, str] = {
    AnswerKind.numeric: "No valid numerical data",
    AnswerKind.choice: "No valid option selections",
    AnswerKind.grid: "No valid grid selections",
    AnswerKind.text: "No valid text responses",
}


@dataclass(frozen=True, slots=True)
class QualityAssessment:
    """Data quality verdict for a question.

    Attributes:
        is_valid: True when every check passed.
        score: Quality score in percent (0-100).
        errors: Human-readable failed checks.
        response_count: Number of non-blank answers.
        usable_count: Number of values usable for the question's analysis.
    """

    is_valid: bool
    score: int
    errors: tuple[str, ...]
    response_count: int
    usable_count: int


def assess_quality(question: QuestionInput) -> QualityAssessment:
    """Score the answers of a question for statistical reporting.

    Args:
        question: Question with its raw answers.

    Returns:
        QualityAssessment for the question.
    """

    kind = answer_kind(question)
    response_count = len(non_blank_answers(question))
    usable, distinct = _usable_values(question, kind=kind)

    errors: list[str] = []
    score = 1.0

    if response_count < MIN_RESPONSES:
        errors.append(f"Insufficient responses ({response_count}/{MIN_RESPONSES})")
        score *= RESPONSE_COUNT_WEIGHT

    if usable == 0:
        errors.append(_NO_DATA_MESSAGES[kind])
        score *= DATA_VALIDITY_WEIGHT
    elif distinct == 1:
        errors.append(ZERO_VARIANCE_MESSAGE)
        score *= VARIANCE_WEIGHT

    return QualityAssessment(
        is_valid=not errors,
        score=round(score * 100),
        errors=tuple(errors),
        response_count=response_count,
        usable_count=usable,
    )


def _usable_values(question: QuestionInput, *, kind: AnswerKind) -> tuple[int, int | None]:
    """Return (usable value count, distinct value count) for a question.

    The distinct count is None for free text, which has no variance check.
    """

    if kind is AnswerKind.numeric:
        values = numeric_values(question)
        return len(values), len(set(values))
    if kind is AnswerKind.choice:
        selections = selected_options(question)
        return len(selections), len(set(selections))
    if kind is AnswerKind.grid:
        cells = valid_grid_cells(question)
        return len(cells), len({cell.column for cell in cells})
    return len(non_blank_answers(question)), None
