"""Forms for survey building, answering and analysis workflows."""

from __future__ import annotations

from collections.abc import Iterable

from django import forms
from django.core.exceptions import NON_FIELD_ERRORS

from analysis.questions import DEFAULT_RATING_SCALE, QuestionType, is_grid
from core.charts import ChartType
from core.services import MAX_RATING_SCALE, MIN_RATING_SCALE, question_definition_errors
from surveys.models import QUESTION_TYPE_CHOICES, Question, Section, Survey


class SurveyForm(forms.ModelForm):
    """Create or edit the survey header."""

    class Meta:
        model = Survey
        fields = ("title", "description", "frame_color", "answer_color")
        widgets = {
            "description": forms.Textarea(attrs={"rows": 3}),
            "frame_color": forms.TextInput(attrs={"type": "color"}),
            "answer_color": forms.TextInput(attrs={"type": "color"}),
        }


class SectionForm(forms.Form):
    """Append a section to a survey."""

    title = forms.CharField(required=False, max_length=200)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={"rows": 2}))


def _lines(value: str | None) -> list[str]:
    """Split textarea input into stripped, non-empty lines."""

    return [line.strip() for line in (value or "").splitlines() if line.strip()]


class QuestionForm(forms.Form):
    """Append a question to one of a survey's sections.

    Options, rows and columns are entered one per line.
    """

    section = forms.ModelChoiceField(queryset=Section.objects.none(), empty_label=None)
    text = forms.CharField(max_length=500, label="Question")
    question_type = forms.ChoiceField(choices=QUESTION_TYPE_CHOICES, label="Type")
    is_required = forms.BooleanField(required=False, label="Required")
    options = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 4}),
        help_text="One option per line (multiple choice, checkboxes, dropdown).",
    )
    rows = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        help_text="One row label per line (grids).",
    )
    columns = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 3}),
        help_text="One column label per line (grids).",
    )
    rating_scale = forms.IntegerField(
        required=False,
        min_value=MIN_RATING_SCALE,
        max_value=MAX_RATING_SCALE,
        initial=DEFAULT_RATING_SCALE,
    )

    def __init__(self, *args, survey: Survey, **kwargs) -> None:
        """Limit the section choices to the given survey."""

        super().__init__(*args, **kwargs)
        self.fields["section"].queryset = Section.objects.filter(survey=survey).order_by("position")

    def clean_options(self) -> list[str]:
        """Return option labels as a list."""

        return _lines(self.cleaned_data.get("options"))

    def clean_rows(self) -> list[str]:
        """Return row labels as a list."""

        return _lines(self.cleaned_data.get("rows"))

    def clean_columns(self) -> list[str]:
        """Return column labels as a list."""

        return _lines(self.cleaned_data.get("columns"))

    def clean(self) -> dict[str, object]:
        """Check that the definition is complete for its question type."""

        cleaned = super().clean()
        if self.errors:
            return cleaned
        if cleaned.get("rating_scale") is None:
            cleaned["rating_scale"] = DEFAULT_RATING_SCALE
        errors = question_definition_errors(
            text=cleaned.get("text") or "",
            question_type=cleaned.get("question_type") or "",
            options=cleaned.get("options") or [],
            rows=cleaned.get("rows") or [],
            columns=cleaned.get("columns") or [],
            rating_scale=cleaned["rating_scale"],
        )
        for field, message in errors.items():
            self.add_error(field, message)
        return cleaned


def question_field_name(question_id: int, row: int | None = None) -> str:
    """Return the form field name for a question (or one grid row)."""

    if row is None:
        return f"q_{question_id}"
    return f"q_{question_id}_r{row}"


class SurveyResponseForm(forms.Form):
    """Respondent form built from a survey's questions.

    Fields are optional at the form level; required answers and option
    membership are enforced by `analysis.validation` when the response is
    submitted.
    """

    def __init__(self, *args, questions: Iterable[Question], **kwargs) -> None:
        """Create one field per question, or one per row for grids."""

        super().__init__(*args, **kwargs)
        self.questions = list(questions)
        for question in self.questions:
            if is_grid(question.question_type):
                column_choices = [(str(index), label) for index, label in enumerate(question.columns)]
                for row, row_label in enumerate(question.rows):
                    self.fields[question_field_name(question.pk, row)] = self._grid_row_field(
                        question, row_label, column_choices
                    )
            else:
                self.fields[question_field_name(question.pk)] = self._question_field(question)

    @staticmethod
    def _question_field(question: Question) -> forms.Field:
        """Build the field for a non-grid question."""

        label = question.text
        question_type = question.question_type
        if question_type == QuestionType.paragraph:
            return forms.CharField(label=label, required=False, widget=forms.Textarea(attrs={"rows": 4}))
        if question_type == QuestionType.multiple_choice:
            return forms.ChoiceField(
                label=label,
                required=False,
                choices=[(option, option) for option in question.options],
                widget=forms.RadioSelect,
            )
        if question_type == QuestionType.dropdown:
            return forms.ChoiceField(
                label=label,
                required=False,
                choices=[("", "Choose"), *[(option, option) for option in question.options]],
            )
        if question_type == QuestionType.checkboxes:
            return forms.MultipleChoiceField(
                label=label,
                required=False,
                choices=[(option, option) for option in question.options],
                widget=forms.CheckboxSelectMultiple,
            )
        if question_type == QuestionType.rating:
            return forms.ChoiceField(
                label=label,
                required=False,
                choices=[(str(value), str(value)) for value in range(1, question.rating_scale + 1)],
                widget=forms.RadioSelect,
            )
        return forms.CharField(label=label, required=False)

    @staticmethod
    def _grid_row_field(question: Question, row_label: str, column_choices: list[tuple[str, str]]) -> forms.Field:
        """Build the field for one row of a grid question."""

        if question.question_type == QuestionType.checkbox_grid:
            return forms.MultipleChoiceField(
                label=row_label,
                required=False,
                choices=column_choices,
                widget=forms.CheckboxSelectMultiple,
            )
        return forms.ChoiceField(
            label=row_label,
            required=False,
            choices=column_choices,
            widget=forms.RadioSelect,
        )

    def answer_values(self) -> dict[int, object]:
        """Return submitted values keyed by question id.

        Grid questions map row index -> selected column index(es); rows
        without a selection are omitted.
        """

        values: dict[int, object] = {}
        for question in self.questions:
            if not is_grid(question.question_type):
                values[question.pk] = self.cleaned_data.get(question_field_name(question.pk))
                continue
            selections: dict[int, object] = {}
            for row in range(len(question.rows)):
                selected = self.cleaned_data.get(question_field_name(question.pk, row))
                if selected:
                    selections[row] = selected
            values[question.pk] = selections
        return values

    def add_question_errors(self, errors: dict[int, str]) -> None:
        """Attach validation messages to the fields of their questions."""

        by_id = {question.pk: question for question in self.questions}
        for question_id, message in errors.items():
            question = by_id.get(question_id)
            if question is None:
                self.add_error(None, message)
            elif is_grid(question.question_type):
                self.add_error(question_field_name(question.pk, 0) if question.rows else None, message)
            else:
                self.add_error(question_field_name(question.pk), message)

    def fields_for(self, question: Question) -> list[forms.BoundField]:
        """Return the bound fields of a question in display order."""

        if is_grid(question.question_type):
            return [self[question_field_name(question.pk, row)] for row in range(len(question.rows))]
        return [self[question_field_name(question.pk)]]


class AnalysisQueryForm(forms.Form):
    """Validate optional analysis query parameters.

    `compare` + `group_by` request a group comparison of a numeric question
    across the options of a choice question. `x` + `y` request a correlation
    between two numeric questions.
    """

    compare = forms.TypedChoiceField(required=False, coerce=int, empty_value=None, choices=())
    group_by = forms.TypedChoiceField(required=False, coerce=int, empty_value=None, choices=())
    x = forms.TypedChoiceField(required=False, coerce=int, empty_value=None, choices=())
    y = forms.TypedChoiceField(required=False, coerce=int, empty_value=None, choices=())
    chart = forms.ChoiceField(
        required=False,
        choices=[(member.value, member.value) for member in ChartType],
    )

    def __init__(self, *args, questions: Iterable[Question], **kwargs) -> None:
        """Limit question choices to the analyzed survey."""

        super().__init__(*args, **kwargs)
        choices = [("", "---------"), *[(str(question.pk), question.text) for question in questions]]
        for name in ("compare", "group_by", "x", "y"):
            self.fields[name].choices = choices

    def clean(self) -> dict[str, object]:
        """Require paired parameters to be given together."""

        cleaned = super().clean()
        if (cleaned.get("compare") is None) != (cleaned.get("group_by") is None):
            raise forms.ValidationError("Provide both compare and group_by.")
        if (cleaned.get("x") is None) != (cleaned.get("y") is None):
            raise forms.ValidationError("Provide both x and y.")
        cleaned["chart"] = cleaned.get("chart") or ChartType.bar.value
        return cleaned

    def first_error(self) -> str:
        """Return a single error message suitable for JSON responses."""

        for field, messages in self.errors.items():
            if field == NON_FIELD_ERRORS:
                return str(messages[0])
            return f"{field}: {messages[0]}"
        return "Invalid query parameters."
