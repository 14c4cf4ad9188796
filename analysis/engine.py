"""Orchestration entry points for the Analysis Engine.

The Analysis Engine is a pure, non-Django module that accepts in-memory inputs
and returns DTOs. It must not import Django or perform database writes.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable
from dataclasses import replace

from .answers import parse_numeric
from .dto import (
    ChoiceAnalysis,
    GridAnalysis,
    GroupComparison,
    NumericAnalysis,
    QuestionAnalysis,
    QuestionCorrelation,
    SurveyAnalysis,
    TextAnalysis,
    TrendAnalysis,
)
from .inference import (
    anova,
    chi_square,
    chi_square_independence,
    chi_square_uniform,
    correlation,
    linear_regression,
    t_test,
)
from .quality import MIN_CATEGORIES, MIN_DATA_POINTS, assess_quality
from .questions import (
    AnswerKind,
    QuestionInput,
    QuestionType,
    answer_kind,
    answer_selections,
    non_blank_answers,
    numeric_values,
    valid_grid_cells,
)
from .summary import frequency_distribution, summary_statistics

TOP_KEYWORDS = 5

_WORD_RE = re.compile(r"[^\W\d_][\w'-]*", re.UNICODE)
_STOPWORDS = frozenset(
    {
        "and", "are", "but", "for", "from", "had", "has", "have", "her", "his",
        "its", "not", "our", "that", "the", "their", "them", "then", "there",
        "they", "this", "very", "was", "were", "what", "when", "which", "with",
        "would", "you", "your",
    }
)


def analyze_survey(questions: Iterable[QuestionInput]) -> SurveyAnalysis:
    """Analyze every question of a survey.

    Args:
        questions: Questions with their answers, in survey order.

    Returns:
        SurveyAnalysis with one entry per question, in input order.
    """

    return SurveyAnalysis(questions=tuple(analyze_question(question) for question in questions))


def analyze_question(question: QuestionInput) -> QuestionAnalysis:
    """Analyze a single question according to its answer kind.

    Args:
        question: Question with its raw answers.

    Returns:
        QuestionAnalysis carrying the quality assessment and the kind-specific
        analysis. Statistical failures are reported as messages on the result.
    """

    kind = answer_kind(question)
    quality = assess_quality(question)
    analysis = QuestionAnalysis(
        question_id=question.id,
        question_text=question.text,
        question_type=question.question_type,
        kind=kind.value,
        quality=quality,
    )

    if kind is AnswerKind.numeric:
        return replace(analysis, numeric=_analyze_numeric(question))
    if kind is AnswerKind.choice:
        return replace(analysis, choice=_analyze_choice(question))
    if kind is AnswerKind.grid:
        return replace(analysis, grid=_analyze_grid(question))
    return replace(analysis, text=_analyze_text(question))


def compare_groups(numeric_question: QuestionInput, grouping_question: QuestionInput) -> GroupComparison:
    """Compare numeric answers across the options of a single-choice question.

    Answers are paired by response id. Two populated groups get a t-test; two
    or more get a one-way ANOVA.

    Args:
        numeric_question: Question whose numeric answers are compared.
        grouping_question: Multiple choice or dropdown question defining groups.

    Returns:
        GroupComparison with per-group values and test results.

    Raises:
        ValueError: When the questions are not numeric / single-choice.
    """

    if answer_kind(numeric_question) is not AnswerKind.numeric:
        raise ValueError("The compared question must have numeric answers.")
    if grouping_question.question_type not in (QuestionType.multiple_choice, QuestionType.dropdown):
        raise ValueError("The grouping question must be a multiple choice or dropdown question.")

    group_by_response = grouping_question.answers_by_response()
    buckets: dict[str, list[float]] = {option: [] for option in grouping_question.options}
    for response_id, raw_value in numeric_question.answers_by_response().items():
        value = parse_numeric(raw_value)
        group = (group_by_response.get(response_id) or "").strip()
        if value is None or group not in buckets:
            continue
        buckets[group].append(value)

    groups = {label: tuple(values) for label, values in buckets.items() if values}
    comparison = GroupComparison(
        numeric_question_id=numeric_question.id,
        grouping_question_id=grouping_question.id,
        groups=groups,
    )
    if len(groups) < 2:
        return replace(comparison, message="At least two answered groups are required.")

    samples = list(groups.values())
    return replace(
        comparison,
        t_test=t_test(samples[0], samples[1]) if len(samples) == 2 else None,
        anova=anova(samples),
    )


def correlate_questions(x_question: QuestionInput, y_question: QuestionInput) -> QuestionCorrelation:
    """Correlate two numeric questions answered by the same respondents.

    Raises:
        ValueError: When either question does not have numeric answers.
    """

    if answer_kind(x_question) is not AnswerKind.numeric or answer_kind(y_question) is not AnswerKind.numeric:
        raise ValueError("Both questions must have numeric answers.")

    y_by_response = y_question.answers_by_response()
    x_values: list[float] = []
    y_values: list[float] = []
    for response_id, raw_x in x_question.answers_by_response().items():
        x_value = parse_numeric(raw_x)
        y_value = parse_numeric(y_by_response.get(response_id))
        if x_value is None or y_value is None:
            continue
        x_values.append(x_value)
        y_values.append(y_value)

    return QuestionCorrelation(
        x_question_id=x_question.id,
        y_question_id=y_question.id,
        pairs=len(x_values),
        correlation=correlation(x_values, y_values),
        regression=linear_regression(x_values, y_values),
    )


def _analyze_numeric(question: QuestionInput) -> NumericAnalysis:
    """Descriptive statistics, frequency test and trend for numeric answers."""

    values = numeric_values(question)
    frequencies = frequency_distribution(values)
    messages: list[str] = []

    chi = None
    observed = list(frequencies.values())
    if len(observed) < MIN_CATEGORIES:
        messages.append("Insufficient response categories for a chi-square test.")
    else:
        chi = chi_square_uniform(observed)

    trend = None
    if len(values) < MIN_DATA_POINTS:
        messages.append("Insufficient data points for trend analysis.")
    else:
        order = [index + 1 for index in range(len(values))]
        trend = TrendAnalysis(
            correlation=correlation(order, list(values)),
            regression=linear_regression(order, list(values)),
            points=tuple(zip(order, values)),
        )

    return NumericAnalysis(
        summary=summary_statistics(values),
        frequencies=frequencies,
        chi_square=chi,
        trend=trend,
        messages=tuple(messages),
    )


def _analyze_choice(question: QuestionInput) -> ChoiceAnalysis:
    """Option frequencies and a uniform chi-square test for choice answers."""

    frequencies: dict[str, int] = {option: 0 for option in question.options}
    total = 0
    for answer in question.answers:
        for selection in answer_selections(question, answer):
            frequencies[selection] = frequencies.get(selection, 0) + 1
            total += 1

    messages: list[str] = []
    chi = None
    observed = [frequencies[option] for option in question.options]
    if len(observed) < MIN_CATEGORIES:
        messages.append("Insufficient response categories for a chi-square test.")
    elif sum(observed) == 0:
        messages.append("No option selections to test.")
    else:
        expected = [sum(observed) / len(observed)] * len(observed)
        chi = chi_square(observed, expected)

    return ChoiceAnalysis(
        frequencies=frequencies,
        total_selections=total,
        chi_square=chi,
        messages=tuple(messages),
    )


def _analyze_grid(question: QuestionInput) -> GridAnalysis:
    """Row x column counts and an independence test for grid answers."""

    counts = [[0 for _column in question.columns] for _row in question.rows]
    for cell in valid_grid_cells(question):
        counts[cell.row][cell.column] += 1

    column_totals = tuple(
        sum(counts[row][column] for row in range(len(question.rows)))
        for column in range(len(question.columns))
    )

    messages: list[str] = []
    chi = None
    try:
        chi = chi_square_independence(counts)
    except ValueError as exc:
        messages.append(str(exc))

    return GridAnalysis(
        rows=question.rows,
        columns=question.columns,
        counts=tuple(tuple(row) for row in counts),
        column_totals=column_totals,
        chi_square=chi,
        messages=tuple(messages),
    )


def _analyze_text(question: QuestionInput) -> TextAnalysis:
    """Answer counts, average length and keywords for free text."""

    answered = non_blank_answers(question)
    if not answered:
        return TextAnalysis(answer_count=0, average_word_count=0.0)

    keywords: Counter[str] = Counter()
    total_words = 0
    for answer in answered:
        words = _WORD_RE.findall(answer.lower())
        total_words += len(words)
        keywords.update(word for word in words if len(word) > 2 and word not in _STOPWORDS)

    return TextAnalysis(
        answer_count=len(answered),
        average_word_count=total_words / len(answered),
        top_keywords=tuple(keywords.most_common(TOP_KEYWORDS)),
    )


