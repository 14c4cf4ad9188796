"""Service-layer functions for the core app.

Services in `core` coordinate Django persistence concerns (ORM, transactions)
with the pure validation and analysis modules.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Mapping, Sequence

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max

from analysis.dto import GroupComparison, QuestionCorrelation, SurveyAnalysis
from analysis.engine import analyze_survey, compare_groups, correlate_questions
from analysis.questions import DEFAULT_RATING_SCALE, QuestionInput, QuestionType, is_choice, is_grid
from analysis.validation import validate_submission
from surveys.models import Answer, Question, Response, Section, Survey

logger = logging.getLogger(__name__)

MIN_RATING_SCALE = 2
MAX_RATING_SCALE = 10


def create_survey(
    *,
    owner,
    title: str,
    description: str = "",
    frame_color: str | None = None,
    answer_color: str | None = None,
) -> Survey:
    """Create a survey with one empty section.

    Args:
        owner: User who owns the survey.
        title: Survey title.
        description: Optional introduction text.
        frame_color: Optional accent color for the survey frame.
        answer_color: Optional accent color for answer controls.

    Returns:
        The persisted Survey.
    """

    colors = {}
    if frame_color:
        colors["frame_color"] = frame_color
    if answer_color:
        colors["answer_color"] = answer_color
    with transaction.atomic():
        survey = Survey.objects.create(owner=owner, title=title.strip(), description=description, **colors)
        Section.objects.create(survey=survey, position=0)
    logger.info("Created survey %s for user %s", survey.pk, owner.pk)
    return survey


def add_section(survey: Survey, *, title: str = "", description: str = "") -> Section:
    """Append a section to the end of a survey."""

    with transaction.atomic():
        position = _next_position(Section.objects.filter(survey=survey))
        return Section.objects.create(survey=survey, title=title, description=description, position=position)


def add_question(
    section: Section,
    *,
    text: str,
    question_type: str,
    is_required: bool = False,
    options: Sequence[str] = (),
    rows: Sequence[str] = (),
    columns: Sequence[str] = (),
    rating_scale: int = DEFAULT_RATING_SCALE,
) -> Question:
    """Append a question to the end of a section.

    Option lists are stripped and blank entries dropped. Only the lists that
    apply to the question type are stored.

    Raises:
        ValidationError: When the definition is incomplete for its type.
    """

    cleaned_options = _clean_labels(options)
    cleaned_rows = _clean_labels(rows)
    cleaned_columns = _clean_labels(columns)
    errors = question_definition_errors(
        text=text,
        question_type=question_type,
        options=cleaned_options,
        rows=cleaned_rows,
        columns=cleaned_columns,
        rating_scale=rating_scale,
    )
    if errors:
        raise ValidationError(errors)

    with transaction.atomic():
        position = _next_position(Question.objects.filter(section=section))
        return Question.objects.create(
            section=section,
            text=text.strip(),
            question_type=question_type,
            is_required=is_required,
            options=cleaned_options if is_choice(question_type) else [],
            rows=cleaned_rows if is_grid(question_type) else [],
            columns=cleaned_columns if is_grid(question_type) else [],
            rating_scale=rating_scale if question_type == QuestionType.rating else DEFAULT_RATING_SCALE,
            position=position,
        )


def question_definition_errors(
    *,
    text: str,
    question_type: str,
    options: Sequence[str],
    rows: Sequence[str],
    columns: Sequence[str],
    rating_scale: int,
) -> dict[str, str]:
    """Return field -> message for an incomplete question definition."""

    errors: dict[str, str] = {}
    if not text.strip():
        errors["text"] = "Question text is required."
    if question_type not in {member.value for member in QuestionType}:
        errors["question_type"] = f"Unknown question type {question_type!r}."
        return errors
    if is_choice(question_type) and not options:
        errors["options"] = "Add at least one option."
    if is_choice(question_type) and len(set(options)) != len(options):
        errors["options"] = "Options must be unique."
    if is_grid(question_type):
        if not rows:
            errors["rows"] = "Add at least one row."
        if not columns:
            errors["columns"] = "Add at least one column."
    if question_type == QuestionType.rating and not MIN_RATING_SCALE <= rating_scale <= MAX_RATING_SCALE:
        errors["rating_scale"] = f"Rating scale must be between {MIN_RATING_SCALE} and {MAX_RATING_SCALE}."
    return errors


def question_input(question: Question, *, answers: Sequence[Answer] = ()) -> QuestionInput:
    """Convert a Question row (and optional answers) into a QuestionInput."""

    return QuestionInput(
        id=question.pk,
        text=question.text,
        question_type=question.question_type,
        options=tuple(question.options or ()),
        rows=tuple(question.rows or ()),
        columns=tuple(question.columns or ()),
        rating_scale=question.rating_scale,
        is_required=question.is_required,
        answers=tuple(answer.value for answer in answers),
        response_ids=tuple(answer.response_id for answer in answers),
    )


def build_question_inputs(survey: Survey) -> tuple[QuestionInput, ...]:
    """Load every question of a survey with its answers.

    Returns:
        QuestionInput DTOs in survey order; answers are ordered by submission
        time.
    """

    questions = list(survey.ordered_questions())
    answers_by_question: dict[int, list[Answer]] = {question.pk: [] for question in questions}
    answers = Answer.objects.filter(response__survey=survey).order_by("response__submitted_at", "response_id")
    for answer in answers:
        answers_by_question.setdefault(answer.question_id, []).append(answer)
    return tuple(question_input(question, answers=answers_by_question[question.pk]) for question in questions)


def submit_response(survey: Survey, values: Mapping[int, object]) -> Response:
    """Validate and store a respondent's answers.

    Args:
        survey: Published survey being answered.
        values: Mapping of question id -> submitted value.

    Returns:
        The persisted Response.

    Raises:
        SubmissionValidationError: When any answer is invalid; nothing is stored.
    """

    questions = tuple(question_input(question) for question in survey.ordered_questions())
    cleaned = validate_submission(questions, values)
    with transaction.atomic():
        response = Response.objects.create(survey=survey)
        Answer.objects.bulk_create(
            [
                Answer(response=response, question_id=question_id, value=value)
                for question_id, value in cleaned.items()
            ]
        )
    logger.info("Stored response %s for survey %s", response.pk, survey.pk)
    return response


def analyze_survey_responses(survey: Survey) -> SurveyAnalysis:
    """Run the full statistical analysis for a survey."""

    return analyze_survey(build_question_inputs(survey))


def compare_survey_groups(survey: Survey, *, numeric_question_id: int, grouping_question_id: int) -> GroupComparison:
    """Compare a numeric question across the options of a grouping question.

    Raises:
        KeyError: When either question does not belong to the survey.
        ValueError: When the question kinds cannot be compared.
    """

    inputs = {question.id: question for question in build_question_inputs(survey)}
    return compare_groups(inputs[numeric_question_id], inputs[grouping_question_id])


def correlate_survey_questions(survey: Survey, *, x_question_id: int, y_question_id: int) -> QuestionCorrelation:
    """Correlate two numeric questions of a survey.

    Raises:
        KeyError: When either question does not belong to the survey.
        ValueError: When either question is not numeric.
    """

    inputs = {question.id: question for question in build_question_inputs(survey)}
    return correlate_questions(inputs[x_question_id], inputs[y_question_id])


def export_responses_csv(survey: Survey) -> str:
    """Render every response of a survey as CSV text.

    Returns:
        CSV with a `submitted_at` column followed by one column per question
        (headed by the question text) and one row per response.
    """

    questions = list(survey.ordered_questions())
    responses = survey.responses.prefetch_related("answers").order_by("submitted_at", "id")

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["submitted_at", *[question.text for question in questions]])
    for response in responses:
        values = {answer.question_id: answer.value for answer in response.answers.all()}
        writer.writerow(
            [response.submitted_at.isoformat(), *[values.get(question.pk, "") for question in questions]]
        )
    return buffer.getvalue()


def _next_position(queryset) -> int:
    """Return the position after the highest existing one."""

    highest = queryset.aggregate(highest=Max("position"))["highest"]
    return 0 if highest is None else highest + 1


def _clean_labels(labels: Sequence[str]) -> list[str]:
    """Strip labels and drop blanks, keeping order."""

    return [str(label).strip() for label in labels if str(label).strip()]
