"""Unit tests for the generative-AI client and report helpers."""

from __future__ import annotations

import pytest
import requests

from analysis.dto import SurveyAnalysis
from core import ai
from core.ai import (
    AIServiceError,
    AIServiceUnavailable,
    GenerativeAIClient,
    analyze_text,
    extract_keywords,
    generate_survey_report,
    summarize_text,
)

pytestmark = pytest.mark.unit


class FakeResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, payload: object, *, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> object:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def _client(api_key: str = "test-key") -> GenerativeAIClient:
    return GenerativeAIClient(
        api_key=api_key,
        model="gemini-test",
        api_url="https://ai.example/models/{model}:generateContent",
        timeout_seconds=5,
    )


def _reply(text: str) -> dict[str, object]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_generate_posts_prompt_with_generation_config(monkeypatch) -> None:
    """The request carries the prompt, sampling config, key and timeout."""

    calls: list[dict[str, object]] = []

    def fake_post(url, **kwargs):
        calls.append({"url": url, **kwargs})
        return FakeResponse(_reply("Report text"))

    monkeypatch.setattr(ai.requests, "post", fake_post)

    assert _client().generate("Hello") == "Report text"

    call = calls[0]
    assert call["url"] == "https://ai.example/models/gemini-test:generateContent"
    assert call["params"] == {"key": "test-key"}
    assert call["timeout"] == 5
    assert call["json"]["contents"][0]["parts"][0]["text"] == "Hello"
    assert call["json"]["generationConfig"] == {
        "temperature": 1.0,
        "topP": 0.95,
        "topK": 40,
        "maxOutputTokens": 8192,
        "responseMimeType": "text/plain",
    }


def test_generate_without_key_is_unavailable(monkeypatch) -> None:
    """An unconfigured client never performs a request."""

    def fail_post(*args, **kwargs):
        raise AssertionError("requests.post should not be called")

    monkeypatch.setattr(ai.requests, "post", fail_post)

    with pytest.raises(AIServiceUnavailable):
        _client(api_key="").generate("Hello")


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({}, status_code=500),
        FakeResponse(ValueError("bad json")),
        FakeResponse({"candidates": []}),
        FakeResponse(_reply("   ")),
    ],
)
def test_generate_raises_service_error_for_bad_responses(monkeypatch, response: FakeResponse) -> None:
    """HTTP errors, invalid JSON and empty candidates raise AIServiceError."""

    monkeypatch.setattr(ai.requests, "post", lambda *args, **kwargs: response)

    with pytest.raises(AIServiceError):
        _client().generate("Hello")


def test_generate_wraps_transport_errors(monkeypatch) -> None:
    """Connection failures surface as AIServiceError."""

    def broken_post(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(ai.requests, "post", broken_post)

    with pytest.raises(AIServiceError, match="ConnectionError"):
        _client().generate("Hello")


def test_helpers_return_messages_instead_of_raising(monkeypatch) -> None:
    """Summaries and keyword extraction degrade gracefully."""

    monkeypatch.setattr(ai.requests, "post", lambda *args, **kwargs: FakeResponse({}, status_code=503))

    assert summarize_text("Some text", client=_client()).startswith("An error occurred during summarization:")
    assert extract_keywords("Some text", client=_client()) == []
    assert summarize_text("", client=_client()) == (
        "An error occurred during summarization: the input text is empty."
    )


def test_analyze_text_prefixes_prompt(monkeypatch) -> None:
    """The instruction precedes the analyzed text in the request."""

    prompts: list[str] = []

    def fake_post(url, **kwargs):
        prompts.append(kwargs["json"]["contents"][0]["parts"][0]["text"])
        return FakeResponse(_reply("Mostly positive."))

    monkeypatch.setattr(ai.requests, "post", fake_post)

    assert analyze_text("Great team", "Rate the tone.", client=_client()) == "Mostly positive."
    assert prompts == ["Rate the tone.\n\nGreat team"]
    assert analyze_text("  ", client=_client()) == "An error occurred during analysis: the input text is empty."


def test_extract_keywords_splits_comma_separated_reply(monkeypatch) -> None:
    """Keywords are trimmed, blanks dropped, and capped at `count`."""

    monkeypatch.setattr(ai.requests, "post", lambda *args, **kwargs: FakeResponse(_reply("alpha, beta , ,gamma")))

    assert extract_keywords("Some text", count=2, client=_client()) == ["alpha", "beta"]


def test_generate_survey_report_success(monkeypatch) -> None:
    """A successful call returns the model text and the prompt used."""

    monkeypatch.setattr(ai.requests, "post", lambda *args, **kwargs: FakeResponse(_reply("All good.")))

    report = generate_survey_report("Team pulse", SurveyAnalysis(), client=_client())

    assert report.ok is True
    assert report.text == "All good."
    assert report.prompt.startswith("## Survey Analysis Report: Team pulse")


def test_generate_survey_report_failure_message(monkeypatch) -> None:
    """Failures return an 'Analysis unavailable' message with the error."""

    report = generate_survey_report("Team pulse", SurveyAnalysis(), client=_client(api_key=""))

    assert report.ok is False
    assert report.text == "Analysis unavailable: AI service is not configured."
    assert report.error == "AI service is not configured."
