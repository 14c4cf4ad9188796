"""Inferential statistics for survey answers.

Significance is evaluated at a fixed 5% level. Functions that accept user
data report insufficient or degenerate input through a `message` on the
result instead of raising, so one bad question never aborts a survey
analysis. `chi_square` raises `ValueError` because its inputs are always
constructed by the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy import stats

ALPHA = 0.05
STRONG_CORRELATION = 0.7
MODERATE_CORRELATION = 0.3


@dataclass(frozen=True, slots=True)
class ChiSquareResult:
    """Result of a chi-square test.

    Attributes:
        statistic: Chi-square statistic.
        degrees_of_freedom: Degrees of freedom used for the critical value.
        p_value: Upper-tail probability of the statistic.
        critical_value: 95% critical value for the degrees of freedom.
        significant: True when the statistic exceeds the critical value.
    """

    statistic: float
    degrees_of_freedom: int
    p_value: float
    critical_value: float
    significant: bool


@dataclass(frozen=True, slots=True)
class RegressionResult:
    """Result of a simple linear regression.

    Attributes:
        slope: Fitted slope (m), or None when the fit is not possible.
        intercept: Fitted intercept (b), or None when the fit is not possible.
        r_squared: Coefficient of determination, or None when y is constant or
            the fit is not possible.
        p_value: Two-sided p-value for a non-zero slope.
        equation: Human-readable `y = mx + b` form.
        message: Reason the fit was not computed.
    """

    slope: float | None
    intercept: float | None
    r_squared: float | None = None
    p_value: float | None = None
    equation: str | None = None
    message: str | None = None

    def predict(self, x: float) -> float | None:
        """Predict y for a given x using the fitted line."""

        if self.slope is None or self.intercept is None:
            return None
        return self.slope * x + self.intercept


@dataclass(frozen=True, slots=True)
class CorrelationResult:
    """Result of a Pearson correlation.

    Attributes:
        coefficient: Pearson r, or None when not computable.
        p_value: Two-sided p-value for r, when computed.
        strength: "Strong", "Moderate" or "Weak".
        direction: "Positive" or "Negative".
        strong: True when |r| exceeds the strong threshold.
        message: Reason the correlation was not computed.
    """

    coefficient: float | None
    p_value: float | None = None
    strength: str | None = None
    direction: str | None = None
    strong: bool = False
    message: str | None = None


@dataclass(frozen=True, slots=True)
class TTestResult:
    """Result of a pooled-variance two-sample t-test.

    Attributes:
        t_value: t statistic, or None when not computable.
        degrees_of_freedom: n1 + n2 - 2.
        p_value: Two-sided p-value.
        critical_value: Two-tailed 95% critical value.
        mean1: Mean of the first group.
        mean2: Mean of the second group.
        significant: True when |t| exceeds the critical value.
        message: Reason the test was not computed.
    """

    t_value: float | None
    degrees_of_freedom: int | None = None
    p_value: float | None = None
    critical_value: float | None = None
    mean1: float | None = None
    mean2: float | None = None
    significant: bool = False
    message: str | None = None


@dataclass(frozen=True, slots=True)
class AnovaResult:
    """Result of a one-way ANOVA.

    Attributes:
        f_value: F statistic, or None when not computable.
        p_value: Upper-tail probability of F.
        df_between: Between-group degrees of freedom (k - 1).
        df_within: Within-group degrees of freedom (N - k).
        significant: True when p < 0.05.
        message: Reason the test was not computed.
    """

    f_value: float | None
    p_value: float | None = None
    df_between: int | None = None
    df_within: int | None = None
    significant: bool = False
    message: str | None = None


def chi_square(observed: Sequence[float], expected: Sequence[float]) -> ChiSquareResult:
    """Run a chi-square goodness-of-fit test.

    Args:
        observed: Observed frequencies per category.
        expected: Expected frequencies per category.

    Returns:
        ChiSquareResult with (k - 1) degrees of freedom.

    Raises:
        ValueError: When lengths differ, fewer than two categories are given, or
            any expected frequency is zero.
    """

    if len(observed) != len(expected):
        raise ValueError("Observed and expected frequencies must have the same length.")
    if len(observed) < 2:
        raise ValueError("At least two categories are required for a chi-square test.")
    if any(exp == 0 for exp in expected):
        raise ValueError("Expected frequencies must be non-zero.")

    statistic = sum((obs - exp) ** 2 / exp for obs, exp in zip(observed, expected))
    degrees_of_freedom = len(observed) - 1
    return _chi_square_result(float(statistic), degrees_of_freedom)


def chi_square_uniform(observed: Sequence[float]) -> ChiSquareResult:
    """Test observed frequencies against a uniform distribution.

    Raises:
        ValueError: When there are no observations or fewer than two categories.
    """

    total = sum(observed)
    if total <= 0:
        raise ValueError("No observations to test.")
    expected = [total / len(observed)] * len(observed)
    return chi_square(observed, expected)


def chi_square_independence(table: Sequence[Sequence[float]]) -> ChiSquareResult:
    """Test rows and columns of a contingency table for independence.

    All-zero rows and columns are dropped before testing.

    Raises:
        ValueError: When fewer than two non-empty rows or columns remain.
    """

    matrix = np.asarray(table, dtype=float)
    if matrix.ndim != 2 or matrix.size == 0:
        raise ValueError("A two-dimensional table is required.")
    matrix = matrix[matrix.sum(axis=1) > 0]
    if matrix.size:
        matrix = matrix[:, matrix.sum(axis=0) > 0]
    if matrix.shape[0] < 2 or matrix.shape[1] < 2:
        raise ValueError("At least two answered rows and columns are required.")

    statistic, _p_value, degrees_of_freedom, _expected = stats.chi2_contingency(matrix, correction=False)
    return _chi_square_result(float(statistic), int(degrees_of_freedom))


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Fit `y = mx + b` by ordinary least squares.

    Args:
        x: Independent values.
        y: Dependent values aligned with `x`.

    Returns:
        RegressionResult; `slope`/`intercept` are None with a message when the
        inputs cannot be fitted.
    """

    if len(x) != len(y) or len(x) < 2:
        return RegressionResult(slope=None, intercept=None, message="Insufficient data for regression.")
    if len(set(x)) == 1:
        return RegressionResult(
            slope=None,
            intercept=None,
            message="Regression is undefined when all x values are identical.",
        )

    fit = stats.linregress(x, y)
    slope = float(fit.slope)
    intercept = float(fit.intercept)
    r_squared = None if len(set(y)) == 1 else float(fit.rvalue) ** 2
    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        p_value=float(fit.pvalue),
        equation=f"y = {slope:.2f}x + {intercept:.2f}",
    )


def correlation(x: Sequence[float], y: Sequence[float]) -> CorrelationResult:
    """Compute the Pearson sample correlation between two aligned series."""

    if len(x) != len(y):
        return CorrelationResult(coefficient=None, message="Series must have the same length.")
    if len(x) < 2:
        return CorrelationResult(coefficient=None, message="Insufficient data for correlation analysis.")
    if len(set(x)) == 1 or len(set(y)) == 1:
        return CorrelationResult(
            coefficient=None,
            message="Correlation is undefined for constant values.",
        )

    r_value, p_value = stats.pearsonr(x, y)
    coefficient = max(-1.0, min(1.0, float(r_value)))
    return CorrelationResult(
        coefficient=coefficient,
        p_value=float(p_value),
        strength=correlation_strength(coefficient),
        direction="Positive" if coefficient > 0 else "Negative",
        strong=abs(coefficient) > STRONG_CORRELATION,
    )


def correlation_strength(coefficient: float) -> str:
    """Label a correlation coefficient as Strong, Moderate or Weak."""

    magnitude = abs(coefficient)
    if magnitude > STRONG_CORRELATION:
        return "Strong"
    if magnitude > MODERATE_CORRELATION:
        return "Moderate"
    return "Weak"


def t_test(group1: Sequence[float], group2: Sequence[float]) -> TTestResult:
    """Run a two-sample Student t-test with pooled variance."""

    if len(group1) < 2 or len(group2) < 2:
        return TTestResult(t_value=None, message="Insufficient data for T-Test.")

    first = np.asarray(group1, dtype=float)
    second = np.asarray(group2, dtype=float)
    degrees_of_freedom = len(first) + len(second) - 2
    pooled_variance = (
        first.var(ddof=1) * (len(first) - 1) + second.var(ddof=1) * (len(second) - 1)
    ) / degrees_of_freedom
    if pooled_variance == 0:
        return TTestResult(
            t_value=None,
            mean1=float(first.mean()),
            mean2=float(second.mean()),
            message="T-Test is undefined when both groups have zero variance.",
        )

    t_value, p_value = stats.ttest_ind(first, second, equal_var=True)
    critical_value = float(stats.t.ppf(1 - ALPHA / 2, degrees_of_freedom))
    return TTestResult(
        t_value=float(t_value),
        degrees_of_freedom=degrees_of_freedom,
        p_value=float(p_value),
        critical_value=critical_value,
        mean1=float(first.mean()),
        mean2=float(second.mean()),
        significant=abs(float(t_value)) > critical_value,
    )


def anova(groups: Sequence[Sequence[float]]) -> AnovaResult:
    """Run a one-way ANOVA across groups."""

    if len(groups) < 2:
        return AnovaResult(f_value=None, message="ANOVA requires at least two groups.")
    if any(len(group) < 2 for group in groups):
        return AnovaResult(
            f_value=None,
            message="All groups must have at least two data points for ANOVA.",
        )
    if all(len(set(group)) == 1 for group in groups):
        return AnovaResult(
            f_value=None,
            message="ANOVA is undefined when every group has zero variance.",
        )

    f_value, p_value = stats.f_oneway(*[np.asarray(group, dtype=float) for group in groups])
    total = sum(len(group) for group in groups)
    return AnovaResult(
        f_value=float(f_value),
        p_value=float(p_value),
        df_between=len(groups) - 1,
        df_within=total - len(groups),
        significant=float(p_value) < ALPHA,
    )


def _chi_square_result(statistic: float, degrees_of_freedom: int) -> ChiSquareResult:
    """Attach the p-value and 95% critical value to a chi-square statistic."""

    critical_value = float(stats.chi2.ppf(1 - ALPHA, degrees_of_freedom))
    return ChiSquareResult(
        statistic=statistic,
        degrees_of_freedom=degrees_of_freedom,
        p_value=float(stats.chi2.sf(statistic, degrees_of_freedom)),
        critical_value=critical_value,
        significant=statistic > critical_value,
    )
