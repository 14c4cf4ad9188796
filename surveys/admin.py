"""Admin registrations for the surveys app."""

from __future__ import annotations

from django.contrib import admin

from surveys.models import Answer, Question, Response, Section, Survey


class SectionInline(admin.TabularInline):
    """Inline editor for a survey's sections."""

    model = Section
    extra = 0


class AnswerInline(admin.TabularInline):
    """Read-only listing of a response's answers."""

    model = Answer
    extra = 0
    readonly_fields = ("question", "value")
    can_delete = False


@admin.register(Survey)
class SurveyAdmin(admin.ModelAdmin):
    """Admin configuration for Survey."""

    list_display = ("title", "owner", "is_published", "created_at")
    list_filter = ("is_published",)
    search_fields = ("title", "owner__username")
    readonly_fields = ("public_id", "created_at", "updated_at")
    inlines = (SectionInline,)


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):
    """Admin configuration for Question."""

    list_display = ("text", "question_type", "section", "position", "is_required")
    list_filter = ("question_type", "is_required")
    search_fields = ("text",)


@admin.register(Response)
class ResponseAdmin(admin.ModelAdmin):
    """Admin configuration for Response."""

    list_display = ("survey", "submitted_at")
    list_filter = ("survey",)
    inlines = (AnswerInline,)
