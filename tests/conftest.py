"""Pytest fixtures shared across Django integration tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from django.contrib.auth import get_user_model


@pytest.fixture(autouse=True)
def _no_ai_key(settings) -> None:
    """Keep tests independent of a developer's GEMINI_API_KEY."""

    settings.GEMINI_API_KEY = ""


@pytest.fixture
def user(db):
    """Return the default survey owner."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="alice", password="password")


@pytest.fixture
def other_user(db):
    """Return a second user who owns nothing."""

    user_model = get_user_model()
    return user_model.objects.create_user(username="bob", password="password")


@pytest.fixture
def auth_client(client, user):
    """Return a Django test client authenticated as the default test user."""

    client.force_login(user)
    return client


@pytest.fixture
def survey(user):
    """Return a published survey covering rating, choice, checkbox, grid and text questions."""

    from core.services import add_question, create_survey

    survey = create_survey(owner=user, title="Team pulse", description="Quarterly check-in")
    section = survey.sections.get()
    add_question(section, text="How satisfied are you?", question_type="rating", is_required=True, rating_scale=5)
    add_question(section, text="Which team?", question_type="multipleChoice", options=["Red", "Blue"])
    add_question(section, text="Tools you use", question_type="checkboxes", options=["Git", "CI", "Docs"])
    add_question(
        section,
        text="Rate each area",
        question_type="multipleChoiceGrid",
        rows=["Speed", "Quality"],
        columns=["Low", "High"],
    )
    add_question(section, text="Anything else?", question_type="paragraph")
    survey.is_published = True
    survey.save(update_fields=["is_published"])
    return survey


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no database access.
    - `integration`: tests touching Django, database, views, commands, or IO.

    Each test must have exactly one of these markers.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
