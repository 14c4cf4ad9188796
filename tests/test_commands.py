"""Integration tests for the analyze_survey management command."""

from __future__ import annotations

import json
from io import StringIO

import pytest
from django.core.management import CommandError, call_command

pytestmark = pytest.mark.integration


@pytest.mark.django_db
def test_analyze_survey_prints_text_summary(survey) -> None:
    """Text output starts with the dataset quality line."""

    stdout = StringIO()

    call_command("analyze_survey", str(survey.pk), stdout=stdout)

    lines = stdout.getvalue().splitlines()
    assert lines[0] == "Team pulse: 0/5 valid questions"
    assert lines[1].startswith("1. [numeric] How satisfied are you? (score 15%")
    assert len(lines) == 6


@pytest.mark.django_db
def test_analyze_survey_prints_json(survey) -> None:
    """--json prints the survey header and every question analysis."""

    stdout = StringIO()

    call_command("analyze_survey", str(survey.pk), "--json", stdout=stdout)

    payload = json.loads(stdout.getvalue())
    assert payload["survey"] == {"id": survey.pk, "title": "Team pulse"}
    assert payload["total_count"] == 5
    assert [question["kind"] for question in payload["questions"]] == ["numeric", "choice", "choice", "grid", "text"]
    assert "ai_report" not in payload


@pytest.mark.django_db
def test_analyze_survey_unknown_id() -> None:
    """Unknown surveys raise CommandError."""

    with pytest.raises(CommandError, match="Survey 999 does not exist."):
        call_command("analyze_survey", "999")


@pytest.mark.django_db
def test_analyze_survey_ai_failure_goes_to_stderr(survey) -> None:
    """--ai without a configured key reports the failure on stderr."""

    stdout = StringIO()
    stderr = StringIO()

    call_command("analyze_survey", str(survey.pk), "--ai", stdout=stdout, stderr=stderr)

    assert "Analysis unavailable: AI service is not configured." in stderr.getvalue()
    assert stdout.getvalue().startswith("Team pulse:")


@pytest.mark.django_db
def test_analyze_survey_json_includes_ai_error(survey) -> None:
    """--json --ai embeds the report outcome in the payload."""

    stdout = StringIO()

    call_command("analyze_survey", str(survey.pk), "--json", "--ai", stdout=stdout)

    report = json.loads(stdout.getvalue())["ai_report"]
    assert report["error"] == "AI service is not configured."
