"""Print the statistical analysis of a survey's responses."""

from __future__ import annotations

import json

from django.core.management.base import BaseCommand, CommandError

from analysis.dto import QuestionAnalysis
from core.ai import generate_survey_report
from core.services import analyze_survey_responses
from surveys.models import Survey


class Command(BaseCommand):
    """Analyze a survey and print the results (text or JSON)."""

    help = "Analyze the responses of a survey and print the results."

    def add_arguments(self, parser) -> None:
        """Add command arguments."""

        parser.add_argument("survey_id", type=int, help="Primary key of the survey to analyze.")
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the analysis as JSON.",
        )
        parser.add_argument(
            "--ai",
            action="store_true",
            help="Also request the AI narrative report.",
        )

    def handle(self, *args, **options) -> str | None:
        """Run the command."""

        survey_id: int = options["survey_id"]
        as_json: bool = options["json"]
        with_ai: bool = options["ai"]

        survey = Survey.objects.filter(pk=survey_id).first()
        if survey is None:
            raise CommandError(f"Survey {survey_id} does not exist.")

        analysis = analyze_survey_responses(survey)
        report = generate_survey_report(survey.title, analysis) if with_ai else None

        if as_json:
            payload: dict[str, object] = {"survey": {"id": survey.pk, "title": survey.title}, **analysis.as_json()}
            if report is not None:
                payload["ai_report"] = {"text": report.text, "error": report.error}
            self.stdout.write(json.dumps(payload, indent=2))
            return None

        self.stdout.write(f"{survey.title}: {analysis.valid_count}/{analysis.total_count} valid questions")
        for index, question in enumerate(analysis.questions, start=1):
            self.stdout.write(_question_line(index, question))
        if report is not None:
            self.stdout.write("")
            if report.ok:
                self.stdout.write(report.text)
            else:
                self.stderr.write(report.text)
        return None


def _question_line(index: int, question: QuestionAnalysis) -> str:
    """Return a one-line summary of a question analysis."""

    status = "valid" if question.quality.is_valid else "; ".join(question.quality.errors)
    line = f"{index}. [{question.kind}] {question.question_text} (score {question.quality.score}%, {status})"
    if question.numeric is not None:
        summary = question.numeric.summary
        line += f" mean={summary.mean:.2f} median={summary.median:.2f} std={summary.std_dev:.2f}"
    elif question.choice is not None:
        line += f" selections={question.choice.total_selections}"
    elif question.grid is not None:
        line += " column_totals=" + ",".join(str(total) for total in question.grid.column_totals)
    elif question.text is not None:
        line += f" answers={question.text.answer_count}"
    return line
