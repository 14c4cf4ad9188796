"""Prompt construction for AI-generated survey reports.

The prompt is a Markdown outline of the statistical analysis. The generative
model expands it into a narrative report; the numbers it quotes come only from
this outline.
"""

from __future__ import annotations

from .dto import QuestionAnalysis, SurveyAnalysis

NOT_AVAILABLE = "N/A"


def build_report_prompt(survey_title: str, analysis: SurveyAnalysis) -> str:
    """Build the Markdown prompt describing a survey analysis.

    Args:
        survey_title: Title of the analyzed survey.
        analysis: SurveyAnalysis to summarize.

    Returns:
        Prompt text for the generative model.
    """

    findings = "\n\n".join(
        question_findings(index, question) for index, question in enumerate(analysis.questions, start=1)
    )
    if not findings:
        findings = "_No questions to analyze._"

    return "\n".join(
        [
            f"## Survey Analysis Report: {survey_title}",
            "",
            "### Introduction",
            "This report provides an in-depth analysis of survey responses, highlighting key patterns, "
            "insights, and actionable recommendations.",
            "",
            "### Executive Summary",
            f"1. **Dataset Quality:** {analysis.valid_count}/{analysis.total_count} valid questions",
            "",
            "### Key Findings",
            findings,
            "",
            "### Statistical Insights",
            "- **Chi-Square Test:** Measuring significance of categorical data",
            "- **Regression Analysis:** Identifying patterns in numerical responses",
            "- **Correlation Analysis:** Measuring relationship strength between variables",
            "",
            "### Recommendations",
            "1. Improve survey structure for better data consistency",
            "2. Enhance question clarity to reduce ambiguity",
            "3. Further analyze trends using predictive modeling",
            "",
            "### Conclusion",
            "Write the final report from the findings above. Quote only the numbers given here, "
            "explain what they mean for the survey owner, and flag questions whose data quality "
            "is too low to support conclusions.",
        ]
    )


def question_findings(index: int, question: QuestionAnalysis) -> str:
    """Render the findings block for a single question.

    Args:
        index: 1-based question number within the survey.
        question: Analysis of the question.

    Returns:
        Markdown lines describing the question.
    """

    header = f"**Question {index}:** {question.question_text}"
    quality = f"**Quality Score:** {question.quality.score}%"
    if not question.quality.is_valid:
        issues = ", ".join(question.quality.errors)
        return "\n".join([header, f"**Issues:** {issues}", quality])

    lines = [header, f"- **Responses:** {question.quality.response_count}"]
    if question.numeric is not None:
        trend = question.numeric.trend
        coefficient = trend.correlation.coefficient if trend is not None else None
        strength = trend.correlation.strength if trend is not None else None
        lines.append(f"- **Mean:** {question.numeric.summary.mean:.2f}")
        lines.append(f"- **Correlation:** {_fixed(coefficient)} ({strength or NOT_AVAILABLE})")
        lines.append(f"- **Statistical Significance:** {_yes_no(question.numeric.chi_square)}")
    elif question.choice is not None:
        top = sorted(question.choice.frequencies.items(), key=lambda kv: kv[1], reverse=True)[:3]
        lines.append("- **Most selected:** " + ", ".join(f"{label} ({count})" for label, count in top))
        lines.append(f"- **Statistical Significance:** {_yes_no(question.choice.chi_square)}")
    elif question.grid is not None:
        totals = ", ".join(
            f"{label} ({count})" for label, count in zip(question.grid.columns, question.grid.column_totals)
        )
        lines.append(f"- **Column totals:** {totals}")
        lines.append(f"- **Statistical Significance:** {_yes_no(question.grid.chi_square)}")
    elif question.text is not None:
        keywords = ", ".join(word for word, _count in question.text.top_keywords) or NOT_AVAILABLE
        lines.append(f"- **Average words per answer:** {question.text.average_word_count:.1f}")
        lines.append(f"- **Keywords:** {keywords}")
    lines.append(f"- {quality}")
    return "\n".join(lines)


def _fixed(value: float | None) -> str:
    """Format an optional float with two decimals."""

    if value is None:
        return NOT_AVAILABLE
    return f"{value:.2f}"


def _yes_no(result: object) -> str:
    """Render the significance flag of an optional test result."""

    if result is None:
        return NOT_AVAILABLE
    return "Yes" if getattr(result, "significant", False) else "No"
