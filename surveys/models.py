"""Database models for surveys and collected responses.

Answers are stored as text in the encoding described in `analysis.answers`;
per-type option checks happen in `analysis.validation` at submission time,
not in the database.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models
from django.db.models import QuerySet
from django.utils import timezone

from analysis.questions import DEFAULT_RATING_SCALE, QuestionType

QUESTION_TYPE_CHOICES: tuple[tuple[str, str], ...] = (
    (QuestionType.short_answer.value, "Short answer"),
    (QuestionType.paragraph.value, "Paragraph"),
    (QuestionType.multiple_choice.value, "Multiple choice"),
    (QuestionType.checkboxes.value, "Checkboxes"),
    (QuestionType.dropdown.value, "Dropdown"),
    (QuestionType.rating.value, "Rating"),
    (QuestionType.multiple_choice_grid.value, "Multiple choice grid"),
    (QuestionType.checkbox_grid.value, "Checkbox grid"),
)


class Survey(models.Model):
    """An owner's survey.

    Attributes:
        owner: User who created the survey and may view its analysis.
        title: Survey title shown to respondents.
        description: Optional introduction text.
        frame_color: Accent color for the survey frame.
        answer_color: Accent color for answer controls.
        public_id: Unguessable identifier used in share links.
        is_published: Whether respondents may submit answers.
    """

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="surveys")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    frame_color = models.CharField(max_length=7, default="#4f46e5")
    answer_color = models.CharField(max_length=7, default="#111827")
    public_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        """Return the survey title for display contexts."""

        return self.title

    def ordered_questions(self) -> QuerySet["Question"]:
        """Return every question of the survey in section/question order."""

        return Question.objects.filter(section__survey=self).order_by("section__position", "position", "id")


class Section(models.Model):
    """An ordered group of questions within a survey."""

    survey = models.ForeignKey(Survey, on_delete=models.CASCADE, related_name="sections")
    title = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(fields=["survey", "position"], name="uniq_survey_section_position"),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return self.title or f"Section {self.position + 1}"


class Question(models.Model):
    """A survey question.

    Attributes:
        section: Section containing the question.
        text: Prompt shown to respondents.
        question_type: One of `QUESTION_TYPE_CHOICES`.
        is_required: Whether respondents must answer.
        options: Option labels for multiple choice, checkboxes and dropdown.
        rows: Row labels for grid questions.
        columns: Column labels for grid questions.
        rating_scale: Maximum rating for rating questions.
        position: Order within the section.
    """

    section = models.ForeignKey(Section, on_delete=models.CASCADE, related_name="questions")
    text = models.CharField(max_length=500)
    question_type = models.CharField(max_length=32, choices=QUESTION_TYPE_CHOICES)
    is_required = models.BooleanField(default=False)
    options = models.JSONField(default=list, blank=True)
    rows = models.JSONField(default=list, blank=True)
    columns = models.JSONField(default=list, blank=True)
    rating_scale = models.PositiveSmallIntegerField(default=DEFAULT_RATING_SCALE)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position", "id"]
        constraints = [
            models.UniqueConstraint(fields=["section", "position"], name="uniq_section_question_position"),
        ]

    def __str__(self) -> str:
        """Return the question text for display contexts."""

        return self.text


class Response(models.Model):
    """A single respondent's submission."""

    survey = models.ForeignKey(Survey, on_delete=models.CASCADE, related_name="responses")
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["submitted_at", "id"]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Response(survey={self.survey_id}, submitted_at={self.submitted_at.isoformat()})"


class Answer(models.Model):
    """The stored answer to one question within a response."""

    response = models.ForeignKey(Response, on_delete=models.CASCADE, related_name="answers")
    question = models.ForeignKey(Question, on_delete=models.CASCADE, related_name="answers")
    value = models.TextField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["response", "question"], name="uniq_response_question_answer"),
        ]

    def __str__(self) -> str:
        """Return a concise display string for admin/debug usage."""

        return f"Answer(question={self.question_id}, value={self.value[:40]!r})"
