"""Question kinds and the in-memory question input used by the Analysis Engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .answers import GridCell, is_blank, is_empty_selection, parse_choices, parse_grid_cells, parse_numeric


class QuestionType(StrEnum):
    """Supported survey question types.

    Values match the identifiers stored on `surveys.Question.question_type`.
    """

    short_answer = "shortAnswer"
    paragraph = "paragraph"
    multiple_choice = "multipleChoice"
    checkboxes = "checkboxes"
    dropdown = "dropdown"
    rating = "rating"
    multiple_choice_grid = "multipleChoiceGrid"
    checkbox_grid = "checkboxGrid"


TEXT_TYPES: frozenset[QuestionType] = frozenset({QuestionType.short_answer, QuestionType.paragraph})
CHOICE_TYPES: frozenset[QuestionType] = frozenset(
    {QuestionType.multiple_choice, QuestionType.checkboxes, QuestionType.dropdown}
)
GRID_TYPES: frozenset[QuestionType] = frozenset(
    {QuestionType.multiple_choice_grid, QuestionType.checkbox_grid}
)
MULTI_SELECT_TYPES: frozenset[QuestionType] = frozenset(
    {QuestionType.checkboxes, QuestionType.checkbox_grid}
)

DEFAULT_RATING_SCALE = 5


def is_text(question_type: str) -> bool:
    """Return True for free-text question types."""

    return question_type in TEXT_TYPES


def is_choice(question_type: str) -> bool:
    """Return True for option-based (non-grid) question types."""

    return question_type in CHOICE_TYPES


def is_grid(question_type: str) -> bool:
    """Return True for grid question types."""

    return question_type in GRID_TYPES


def is_multi_select(question_type: str) -> bool:
    """Return True when a question accepts more than one selection."""

    return question_type in MULTI_SELECT_TYPES


@dataclass(frozen=True)
class QuestionInput:
    """A question and its raw answers, detached from persistence.

    Attributes:
        id: Identifier of the persisted question (or any stable key).
        text: Question prompt shown to respondents.
        question_type: One of the `QuestionType` values.
        options: Declared options for choice questions.
        rows: Row labels for grid questions.
        columns: Column labels for grid questions.
        rating_scale: Maximum rating for rating questions.
        is_required: Whether respondents must answer.
        answers: Raw stored answer values in submission order.
        response_ids: Optional response identifiers aligned with `answers`,
            used to pair answers across questions.
    """

    id: int
    text: str
    question_type: str
    options: tuple[str, ...] = ()
    rows: tuple[str, ...] = ()
    columns: tuple[str, ...] = ()
    rating_scale: int = DEFAULT_RATING_SCALE
    is_required: bool = False
    answers: tuple[str, ...] = ()
    response_ids: tuple[int, ...] = ()

    def answers_by_response(self) -> dict[int, str]:
        """Map response ids to raw answers.

        Returns:
            Mapping of response id -> raw answer. Empty when response ids were
            not supplied.
        """

        return dict(zip(self.response_ids, self.answers))


class AnswerKind(StrEnum):
    """How a question's answers are analyzed."""

    numeric = "numeric"
    choice = "choice"
    grid = "grid"
    text = "text"


def answer_kind(question: QuestionInput) -> AnswerKind:
    """Classify a question for analysis.

    Rating questions are numeric. Text questions are numeric when every
    non-blank answer parses as a number, and text otherwise.
    """

    if question.question_type == QuestionType.rating:
        return AnswerKind.numeric
    if is_choice(question.question_type):
        return AnswerKind.choice
    if is_grid(question.question_type):
        return AnswerKind.grid

    answered = non_blank_answers(question)
    if answered and all(parse_numeric(answer) is not None for answer in answered):
        return AnswerKind.numeric
    return AnswerKind.text


def non_blank_answers(question: QuestionInput) -> tuple[str, ...]:
    """Return answers that carry content, in submission order."""

    if question.question_type == QuestionType.checkboxes or is_grid(question.question_type):
        return tuple(answer for answer in question.answers if not is_empty_selection(answer))
    return tuple(answer for answer in question.answers if not is_blank(answer))


def numeric_values(question: QuestionInput) -> tuple[float, ...]:
    """Return the finite numeric answers in submission order."""

    values: list[float] = []
    for answer in question.answers:
        number = parse_numeric(answer)
        if number is not None:
            values.append(number)
    return tuple(values)


def selected_options(question: QuestionInput) -> tuple[str, ...]:
    """Return every selection that matches a declared option.

    Checkbox answers contribute one entry per selected option.
    """

    declared = set(question.options)
    return tuple(
        choice
        for answer in question.answers
        for choice in answer_selections(question, answer)
        if choice in declared
    )


def answer_selections(question: QuestionInput, answer: object) -> tuple[str, ...]:
    """Return the options chosen in one stored choice answer.

    Only checkbox answers are JSON lists. A multiple choice or dropdown
    answer is the option label itself, even when the label looks like JSON.
    """

    if question.question_type == QuestionType.checkboxes:
        return parse_choices(answer)
    if is_blank(answer):
        return ()
    return (str(answer).strip(),)


def valid_grid_cells(question: QuestionInput) -> tuple[GridCell, ...]:
    """Return grid cells that fall inside the declared rows and columns."""

    row_count = len(question.rows)
    column_count = len(question.columns)
    return tuple(
        cell
        for answer in question.answers
        for cell in parse_grid_cells(answer)
        if 0 <= cell.row < row_count and 0 <= cell.column < column_count
    )
