"""Views for survey building, public answering and response analysis."""

from __future__ import annotations

import logging
from uuid import UUID

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.db.models import Count
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from analysis.dto import GroupComparison, QuestionCorrelation, SurveyAnalysis
from analysis.validation import SubmissionValidationError
from core.ai import generate_survey_report
from core.charts import ChartType, question_chart
from core.forms import AnalysisQueryForm, QuestionForm, SectionForm, SurveyForm, SurveyResponseForm
from core.services import (
    add_question as add_question_to_section,
    add_section as add_section_to_survey,
    analyze_survey_responses,
    compare_survey_groups,
    correlate_survey_questions,
    create_survey as create_survey_for_owner,
    export_responses_csv,
    submit_response,
)
from surveys.models import Survey

logger = logging.getLogger(__name__)


def _owned_survey(request: HttpRequest, survey_id: int) -> Survey:
    """Return the survey if it belongs to the signed-in user, else raise 404."""

    return get_object_or_404(Survey, pk=survey_id, owner=request.user)


def _share_url(request: HttpRequest, survey: Survey) -> str:
    """Return the absolute public link for a survey."""

    return request.build_absolute_uri(reverse("core:respond", args=[survey.public_id]))


@login_required
def dashboard(request: HttpRequest) -> HttpResponse:
    """List the signed-in user's surveys with their response counts."""

    surveys = (
        Survey.objects.filter(owner=request.user)
        .annotate(response_count=Count("responses"))
        .order_by("-created_at", "-id")
    )
    return render(request, "core/dashboard.html", {"surveys": surveys})


@login_required
def create_survey(request: HttpRequest) -> HttpResponse:
    """Create a new survey and continue to its builder page."""

    form = SurveyForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        survey = create_survey_for_owner(
            owner=request.user,
            title=form.cleaned_data["title"],
            description=form.cleaned_data.get("description") or "",
            frame_color=form.cleaned_data.get("frame_color"),
            answer_color=form.cleaned_data.get("answer_color"),
        )
        messages.success(request, "Survey created.")
        return redirect("core:survey_detail", survey_id=survey.pk)
    return render(request, "core/survey_form.html", {"form": form})


def _render_survey_detail(
    request: HttpRequest,
    survey: Survey,
    *,
    section_form: SectionForm | None = None,
    question_form: QuestionForm | None = None,
) -> HttpResponse:
    """Render the builder page with optional bound forms."""

    sections = survey.sections.prefetch_related("questions").order_by("position")
    return render(
        request,
        "core/survey_detail.html",
        {
            "survey": survey,
            "sections": sections,
            "response_count": survey.responses.count(),
            "share_url": _share_url(request, survey),
            "section_form": section_form or SectionForm(),
            "question_form": question_form or QuestionForm(survey=survey),
        },
    )


@login_required
def survey_detail(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Render the survey builder page."""

    return _render_survey_detail(request, _owned_survey(request, survey_id))


@login_required
@require_POST
def add_section(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Append a section to a survey."""

    survey = _owned_survey(request, survey_id)
    form = SectionForm(request.POST)
    if not form.is_valid():
        return _render_survey_detail(request, survey, section_form=form)
    add_section_to_survey(
        survey,
        title=form.cleaned_data.get("title") or "",
        description=form.cleaned_data.get("description") or "",
    )
    messages.success(request, "Section added.")
    return redirect("core:survey_detail", survey_id=survey.pk)


@login_required
@require_POST
def add_question(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Append a question to one of the survey's sections."""

    survey = _owned_survey(request, survey_id)
    form = QuestionForm(request.POST, survey=survey)
    if not form.is_valid():
        return _render_survey_detail(request, survey, question_form=form)
    try:
        add_question_to_section(
            form.cleaned_data["section"],
            text=form.cleaned_data["text"],
            question_type=form.cleaned_data["question_type"],
            is_required=form.cleaned_data.get("is_required") or False,
            options=form.cleaned_data.get("options") or [],
            rows=form.cleaned_data.get("rows") or [],
            columns=form.cleaned_data.get("columns") or [],
            rating_scale=form.cleaned_data["rating_scale"],
        )
    except ValidationError as exc:
        for field, field_errors in exc.message_dict.items():
            for message in field_errors:
                form.add_error(field if field in form.fields else None, message)
        return _render_survey_detail(request, survey, question_form=form)
    messages.success(request, "Question added.")
    return redirect("core:survey_detail", survey_id=survey.pk)


@login_required
@require_POST
def toggle_publish(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Publish or unpublish a survey."""

    survey = _owned_survey(request, survey_id)
    survey.is_published = not survey.is_published
    survey.save(update_fields=["is_published", "updated_at"])
    messages.success(request, "Survey published." if survey.is_published else "Survey unpublished.")
    return redirect("core:survey_detail", survey_id=survey.pk)


def _requested_comparisons(
    survey: Survey, form: AnalysisQueryForm
) -> tuple[GroupComparison | None, QuestionCorrelation | None]:
    """Run the optional comparison and correlation requested by the query.

    Raises:
        ValueError: When the selected questions cannot be compared.
    """

    comparison = None
    question_correlation = None
    if form.cleaned_data.get("compare") is not None:
        comparison = compare_survey_groups(
            survey,
            numeric_question_id=form.cleaned_data["compare"],
            grouping_question_id=form.cleaned_data["group_by"],
        )
    if form.cleaned_data.get("x") is not None:
        question_correlation = correlate_survey_questions(
            survey,
            x_question_id=form.cleaned_data["x"],
            y_question_id=form.cleaned_data["y"],
        )
    return comparison, question_correlation


def _question_charts(analysis: SurveyAnalysis, chart_type: str) -> dict[str, object]:
    """Return chart payloads keyed by question id for the template."""

    return {str(question.question_id): question_chart(question, chart_type) for question in analysis.questions}


@login_required
def survey_analysis(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Render the statistical analysis of a survey's responses."""

    survey = _owned_survey(request, survey_id)
    questions = list(survey.ordered_questions())
    query_form = AnalysisQueryForm(request.GET or None, questions=questions)

    comparison = None
    question_correlation = None
    chart_type = ChartType.bar.value
    analysis_error = None
    if query_form.is_bound and query_form.is_valid():
        chart_type = query_form.cleaned_data["chart"]
        try:
            comparison, question_correlation = _requested_comparisons(survey, query_form)
        except ValueError as exc:
            analysis_error = str(exc)

    analysis = analyze_survey_responses(survey)
    return render(
        request,
        "core/survey_analysis.html",
        {
            "survey": survey,
            "analysis": analysis,
            "query_form": query_form,
            "chart_type": chart_type,
            "chart_types": [member.value for member in ChartType],
            "charts": _question_charts(analysis, chart_type),
            "comparison": comparison,
            "correlation": question_correlation,
            "analysis_error": analysis_error,
        },
    )


@login_required
def survey_analysis_api(request: HttpRequest, survey_id: int) -> JsonResponse:
    """Return the survey analysis as JSON."""

    survey = _owned_survey(request, survey_id)
    query_form = AnalysisQueryForm(request.GET, questions=survey.ordered_questions())
    if not query_form.is_valid():
        return JsonResponse({"ok": False, "error": query_form.first_error()}, status=400)
    try:
        comparison, question_correlation = _requested_comparisons(survey, query_form)
    except ValueError as exc:
        return JsonResponse({"ok": False, "error": str(exc)}, status=400)

    analysis = analyze_survey_responses(survey)
    return JsonResponse(
        {
            "ok": True,
            "survey": {"id": survey.pk, "title": survey.title, "response_count": survey.responses.count()},
            "analysis": analysis.as_json(),
            "charts": _question_charts(analysis, query_form.cleaned_data["chart"]),
            "comparison": comparison.as_json() if comparison is not None else None,
            "correlation": question_correlation.as_json() if question_correlation is not None else None,
        }
    )


@login_required
@require_POST
def ai_report(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Generate and show the AI narrative report for a survey."""

    survey = _owned_survey(request, survey_id)
    report = generate_survey_report(survey.title, analyze_survey_responses(survey))
    if not report.ok:
        messages.error(request, report.text)
    return render(request, "core/ai_report.html", {"survey": survey, "report": report})


@login_required
def export_responses(request: HttpRequest, survey_id: int) -> HttpResponse:
    """Download every response of a survey as CSV."""

    survey = _owned_survey(request, survey_id)
    response = HttpResponse(export_responses_csv(survey), content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="survey-{survey.pk}-responses.csv"'
    return response


def respond(request: HttpRequest, public_id: UUID) -> HttpResponse:
    """Render and accept the public response form of a published survey."""

    survey = get_object_or_404(Survey, public_id=public_id, is_published=True)
    sections = list(survey.sections.prefetch_related("questions").order_by("position"))
    questions = [question for section in sections for question in section.questions.all()]
    form = SurveyResponseForm(request.POST or None, questions=questions)

    if request.method == "POST" and form.is_valid():
        try:
            submit_response(survey, form.answer_values())
        except SubmissionValidationError as exc:
            logger.info("Rejected response for survey %s: %s", survey.pk, exc)
            form.add_question_errors(exc.errors)
        else:
            return redirect("core:thank_you", public_id=survey.public_id)

    blocks = [
        (section, [(question, form.fields_for(question)) for question in section.questions.all()])
        for section in sections
    ]
    return render(
        request,
        "core/respond.html",
        {"survey": survey, "blocks": blocks, "form": form},
    )


def thank_you(request: HttpRequest, public_id: UUID) -> HttpResponse:
    """Confirm a submitted response."""

    survey = get_object_or_404(Survey, public_id=public_id)
    return render(request, "core/thank_you.html", {"survey": survey})
