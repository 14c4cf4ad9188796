"""Django app configuration for Surveys."""

from __future__ import annotations

from django.apps import AppConfig


class SurveysConfig(AppConfig):
    """AppConfig for survey definitions and collected responses."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "surveys"
