"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.dashboard, name="dashboard"),
    path("surveys/new/", views.create_survey, name="create_survey"),
    path("surveys/<int:survey_id>/", views.survey_detail, name="survey_detail"),
    path("surveys/<int:survey_id>/sections/", views.add_section, name="add_section"),
    path("surveys/<int:survey_id>/questions/", views.add_question, name="add_question"),
    path("surveys/<int:survey_id>/publish/", views.toggle_publish, name="toggle_publish"),
    path("surveys/<int:survey_id>/analysis/", views.survey_analysis, name="survey_analysis"),
    path("surveys/<int:survey_id>/analysis.json", views.survey_analysis_api, name="survey_analysis_api"),
    path("surveys/<int:survey_id>/report/", views.ai_report, name="ai_report"),
    path("surveys/<int:survey_id>/responses.csv", views.export_responses, name="export_responses"),
    path("s/<uuid:public_id>/", views.respond, name="respond"),
    path("s/<uuid:public_id>/thanks/", views.thank_you, name="thank_you"),
]
