"""Validation for submitted survey answers.

Unlike `analysis.answers`, this module fails fast: a submitted value must
satisfy the question's declared options, scale or grid shape before it is
stored. Valid answers are returned in their normalized storage form.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

from .answers import GridCell, encode_grid_cells, is_blank, parse_choices, parse_grid_cells, parse_numeric
from .questions import QuestionInput, QuestionType, is_choice, is_grid, is_text

REQUIRED_MESSAGE = "This question is required."


class AnswerValidationError(ValueError):
    """Raised when a submitted answer does not satisfy its question."""

    def __init__(self, *, question_id: int, message: str) -> None:
        """Initialize the error.

        Args:
            question_id: Identifier of the question that failed validation.
            message: Human-readable reason shown to the respondent.
        """

        super().__init__(message)
        self.question_id = question_id
        self.message = message


class SubmissionValidationError(ValueError):
    """Raised when one or more answers in a submission are invalid.

    Attributes:
        errors: Mapping of question id -> error message.
    """

    def __init__(self, errors: Mapping[int, str]) -> None:
        """Initialize the error.

        Args:
            errors: Mapping of question id -> error message.
        """

        super().__init__(f"{len(errors)} answer(s) failed validation.")
        self.errors = dict(errors)


def validate_answer(question: QuestionInput, raw_value: object) -> str:
    """Validate and normalize a single submitted answer.

    Args:
        question: Question definition the answer belongs to.
        raw_value: Submitted value. Strings for text/choice/rating questions, a
            list of strings (or JSON text) for checkboxes, and a mapping of row
            index -> selection(s) (or stored JSON text) for grids.

    Returns:
        The normalized value to persist. Optional blank answers return "".

    Raises:
        AnswerValidationError: When the value violates the question definition.
    """

    question_type = question.question_type
    if is_grid(question_type):
        return _validate_grid(question, raw_value)

    if is_blank(raw_value) or (isinstance(raw_value, (list, tuple)) and not raw_value):
        if question.is_required:
            raise AnswerValidationError(question_id=question.id, message=REQUIRED_MESSAGE)
        return ""

    if is_text(question_type):
        return str(raw_value).strip()
    if question_type == QuestionType.rating:
        return _validate_rating(question, raw_value)
    if question_type == QuestionType.checkboxes:
        return _validate_checkboxes(question, raw_value)
    if is_choice(question_type):
        return _validate_single_choice(question, raw_value)

    raise AnswerValidationError(
        question_id=question.id, message=f"Unsupported question type {question_type!r}."
    )


def validate_submission(
    questions: Sequence[QuestionInput],
    values: Mapping[int, object],
) -> dict[int, str]:
    """Validate every answer of a survey submission.

    Args:
        questions: All questions of the survey.
        values: Mapping of question id -> submitted value. Missing questions are
            treated as blank.

    Returns:
        Mapping of question id -> normalized value for every question.

    Raises:
        SubmissionValidationError: When any answer is invalid; all errors are
            collected before raising.
    """

    known_ids = {question.id for question in questions}
    errors: dict[int, str] = {}
    cleaned: dict[int, str] = {}

    for question_id in values:
        if question_id not in known_ids:
            errors[question_id] = "Unknown question."

    for question in questions:
        try:
            cleaned[question.id] = validate_answer(question, values.get(question.id))
        except AnswerValidationError as exc:
            errors[question.id] = exc.message

    if errors:
        raise SubmissionValidationError(errors)
    return cleaned


def _validate_single_choice(question: QuestionInput, raw_value: object) -> str:
    """Validate a multiple choice or dropdown answer."""

    value = str(raw_value).strip()
    if value not in question.options:
        raise AnswerValidationError(
            question_id=question.id,
            message=f"{value!r} is not one of the available options.",
        )
    return value


def _validate_checkboxes(question: QuestionInput, raw_value: object) -> str:
    """Validate a checkboxes answer and encode it as a JSON list."""

    selected = _checkbox_selections(question, raw_value)
    if not selected:
        if question.is_required:
            raise AnswerValidationError(question_id=question.id, message=REQUIRED_MESSAGE)
        return ""
    if len(set(selected)) != len(selected):
        raise AnswerValidationError(question_id=question.id, message="Duplicate selections are not allowed.")
    unknown = [value for value in selected if value not in question.options]
    if unknown:
        labels = ", ".join(repr(value) for value in unknown)
        raise AnswerValidationError(
            question_id=question.id,
            message=f"Not available options: {labels}.",
        )
    return json.dumps(list(selected))


def _checkbox_selections(question: QuestionInput, raw_value: object) -> tuple[str, ...]:
    """Return the submitted checkbox labels.

    Raises:
        AnswerValidationError: When a listed selection is not a string.
    """

    items = raw_value
    if isinstance(raw_value, str):
        text = raw_value.strip()
        if not text.startswith("["):
            return parse_choices(text)
        try:
            items = json.loads(text)
        except json.JSONDecodeError:
            return (text,)
    if not isinstance(items, (list, tuple)):
        return parse_choices(items)
    invalid = [item for item in items if not isinstance(item, str)]
    if invalid:
        raise AnswerValidationError(
            question_id=question.id,
            message=f"Checkbox selections must be option labels, got {invalid[0]!r}.",
        )
    return parse_choices(items)


def _validate_rating(question: QuestionInput, raw_value: object) -> str:
    """Validate a rating answer against the question's scale."""

    number = parse_numeric(raw_value)
    if number is None or not number.is_integer():
        raise AnswerValidationError(question_id=question.id, message="Rating must be a whole number.")
    rating = int(number)
    if rating < 1 or rating > question.rating_scale:
        raise AnswerValidationError(
            question_id=question.id,
            message=f"Rating must be between 1 and {question.rating_scale}.",
        )
    return str(rating)


def _validate_grid(question: QuestionInput, raw_value: object) -> str:
    """Validate a grid answer and encode it in the stored grid shape."""

    cells = _grid_cells_from_submission(question, raw_value)
    row_count = len(question.rows)
    column_count = len(question.columns)

    by_row: dict[int, list[int]] = {}
    for cell in cells:
        if cell.row < 0 or cell.row >= row_count:
            raise AnswerValidationError(question_id=question.id, message=f"Unknown grid row {cell.row}.")
        if cell.column < 0 or cell.column >= column_count:
            raise AnswerValidationError(
                question_id=question.id, message=f"Unknown grid column {cell.column}."
            )
        selections = by_row.setdefault(cell.row, [])
        if cell.column in selections:
            raise AnswerValidationError(
                question_id=question.id,
                message=f"Duplicate selection in row {question.rows[cell.row]!r}.",
            )
        selections.append(cell.column)

    if question.question_type == QuestionType.multiple_choice_grid:
        crowded = [row for row, selections in by_row.items() if len(selections) > 1]
        if crowded:
            raise AnswerValidationError(
                question_id=question.id,
                message=f"Select only one column in row {question.rows[crowded[0]]!r}.",
            )

    if question.is_required and len(by_row) < row_count:
        raise AnswerValidationError(question_id=question.id, message="Answer every row of this grid.")
    if not by_row:
        return ""

    if question.question_type == QuestionType.multiple_choice_grid:
        return encode_grid_cells({row: selections[0] for row, selections in by_row.items()})
    return encode_grid_cells({row: sorted(selections) for row, selections in by_row.items()})


def _grid_cells_from_submission(question: QuestionInput, raw_value: object) -> tuple[GridCell, ...]:
    """Convert submitted grid data into cells.

    Raises:
        AnswerValidationError: When row keys or column values are not integers.
    """

    if not isinstance(raw_value, Mapping):
        return parse_grid_cells(raw_value)

    cells: list[GridCell] = []
    for key, selections in raw_value.items():
        try:
            row = int(key)
        except (TypeError, ValueError) as exc:
            raise AnswerValidationError(question_id=question.id, message=f"Invalid grid row {key!r}.") from exc
        values = selections if isinstance(selections, (list, tuple)) else [selections]
        for selection in values:
            if selection is None or selection == "":
                continue
            try:
                column = int(selection)
            except (TypeError, ValueError) as exc:
                raise AnswerValidationError(
                    question_id=question.id, message=f"Invalid grid column {selection!r}."
                ) from exc
            cells.append(GridCell(row=row, column=column))
    return tuple(cells)
