"""DTO types returned by the Analysis Engine.

DTOs are plain data containers used to transport analysis results to views,
reports and the CLI. They intentionally avoid any Django/ORM dependencies.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from .inference import AnovaResult, ChiSquareResult, CorrelationResult, RegressionResult, TTestResult
from .quality import QualityAssessment
from .summary import SummaryStatistics


@dataclass(frozen=True)
class TrendAnalysis:
    """Numeric answers analyzed against submission order (1-based).

    Attributes:
        correlation: Correlation of value vs. submission order.
        regression: Linear fit of value vs. submission order.
        points: (order, value) pairs used for both computations.
    """

    correlation: CorrelationResult
    regression: RegressionResult
    points: tuple[tuple[int, float], ...] = ()


@dataclass(frozen=True)
class NumericAnalysis:
    """Analysis of a numeric question (ratings and numeric free text).

    Attributes:
        summary: Descriptive statistics.
        frequencies: Value label -> count in first-seen order.
        chi_square: Goodness-of-fit against a uniform split of observed values.
        trend: Trend analysis when enough data points exist.
        messages: Reasons optional computations were skipped.
    """

    summary: SummaryStatistics
    frequencies: dict[str, int]
    chi_square: ChiSquareResult | None = None
    trend: TrendAnalysis | None = None
    messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChoiceAnalysis:
    """Analysis of a multiple choice, dropdown or checkboxes question.

    Attributes:
        frequencies: Option -> count. Declared options come first (zero counts
            kept); undeclared stored values follow.
        total_selections: Number of counted selections.
        chi_square: Goodness-of-fit against a uniform split over options.
        messages: Reasons optional computations were skipped.
    """

    frequencies: dict[str, int]
    total_selections: int
    chi_square: ChiSquareResult | None = None
    messages: tuple[str, ...] = ()


@dataclass(frozen=True)
class GridAnalysis:
    """Analysis of a grid question.

    Attributes:
        rows: Row labels.
        columns: Column labels.
        counts: Row x column selection counts.
        column_totals: Selections per column across all rows.
        chi_square: Row/column independence test.
        messages: Reasons optional computations were skipped.
    """

    rows: tuple[str, ...]
    columns: tuple[str, ...]
    counts: tuple[tuple[int, ...], ...]
    column_totals: tuple[int, ...]
    chi_square: ChiSquareResult | None = None
    messages: tuple[str, ...] = ()

    def labelled_rows(self) -> tuple[tuple[str, tuple[int, ...]], ...]:
        """Return (row label, counts) pairs in row order."""

        return tuple(zip(self.rows, self.counts))


@dataclass(frozen=True)
class TextAnalysis:
    """Analysis of free-text answers.

    Attributes:
        answer_count: Non-blank answers.
        average_word_count: Mean words per non-blank answer.
        top_keywords: (keyword, count) pairs, most frequent first.
    """

    answer_count: int
    average_word_count: float
    top_keywords: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class QuestionAnalysis:
    """Per-question analysis result.

    Attributes:
        question_id: Identifier of the question.
        question_text: Prompt text.
        question_type: Stored question type.
        kind: Analysis kind (numeric, choice, grid, text).
        quality: Data quality assessment.
        numeric: Populated for numeric questions.
        choice: Populated for choice questions.
        grid: Populated for grid questions.
        text: Populated for text questions.
    """

    question_id: int
    question_text: str
    question_type: str
    kind: str
    quality: QualityAssessment
    numeric: NumericAnalysis | None = None
    choice: ChoiceAnalysis | None = None
    grid: GridAnalysis | None = None
    text: TextAnalysis | None = None

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return asdict(self)


@dataclass(frozen=True)
class SurveyAnalysis:
    """Analysis of every question in a survey.

    Attributes:
        questions: Per-question analyses in survey order.
    """

    questions: tuple[QuestionAnalysis, ...] = ()

    @property
    def total_count(self) -> int:
        """Number of analyzed questions."""

        return len(self.questions)

    @property
    def valid_count(self) -> int:
        """Number of questions passing every quality check."""

        return sum(1 for question in self.questions if question.quality.is_valid)

    def valid_questions(self) -> tuple[QuestionAnalysis, ...]:
        """Return the analyses that passed every quality check."""

        return tuple(question for question in self.questions if question.quality.is_valid)

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return {
            "valid_count": self.valid_count,
            "total_count": self.total_count,
            "questions": [question.as_json() for question in self.questions],
        }


@dataclass(frozen=True)
class GroupComparison:
    """Numeric answers compared across groups defined by a choice question.

    Attributes:
        numeric_question_id: Question whose values are compared.
        grouping_question_id: Question whose options define the groups.
        groups: Group label -> numeric values, in declared option order.
        t_test: Two-sample t-test, populated when exactly two groups exist.
        anova: One-way ANOVA across all groups.
        message: Reason no test could be run.
    """

    numeric_question_id: int
    grouping_question_id: int
    groups: dict[str, tuple[float, ...]] = field(default_factory=dict)
    t_test: TTestResult | None = None
    anova: AnovaResult | None = None
    message: str | None = None

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return asdict(self)


@dataclass(frozen=True)
class QuestionCorrelation:
    """Two numeric questions paired by response.

    Attributes:
        x_question_id: Question used as the independent variable.
        y_question_id: Question used as the dependent variable.
        pairs: Number of responses answering both questions numerically.
        correlation: Pearson correlation of the pairs.
        regression: Linear fit of y on x.
    """

    x_question_id: int
    y_question_id: int
    pairs: int
    correlation: CorrelationResult
    regression: RegressionResult

    def as_json(self) -> dict[str, object]:
        """Return a JSON-serializable representation."""

        return asdict(self)
