"""Generative-AI client used for narrative survey reports.

The client talks to the Gemini `generateContent` REST endpoint through
`requests`. Report helpers never raise: failures are logged and turned into a
message the survey owner can read in place of the report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests
from django.conf import settings

from analysis.dto import SurveyAnalysis
from analysis.report import build_report_prompt

logger = logging.getLogger(__name__)

DEFAULT_ANALYZE_PROMPT = "Analyze the following text and provide useful insights:"
NO_RESPONSE_MESSAGE = "No response was returned by the AI service."


class AIServiceError(RuntimeError):
    """Raised when the AI service cannot produce a response."""


class AIServiceUnavailable(AIServiceError):
    """Raised when the AI service is not configured (no API key)."""


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Sampling parameters sent with every request."""

    temperature: float = 1.0
    top_p: float = 0.95
    top_k: int = 40
    max_output_tokens: int = 8192

    def as_payload(self) -> dict[str, object]:
        """Return the `generationConfig` request object."""

        return {
            "temperature": self.temperature,
            "topP": self.top_p,
            "topK": self.top_k,
            "maxOutputTokens": self.max_output_tokens,
            "responseMimeType": "text/plain",
        }


@dataclass(frozen=True, slots=True)
class AIReport:
    """Outcome of an AI report request.

    Attributes:
        text: Report text, or a user-facing failure message.
        prompt: Prompt sent to the model.
        error: Failure reason when the report could not be generated.
    """

    text: str
    prompt: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True when the report was generated."""

        return self.error is None


@dataclass(frozen=True)
class GenerativeAIClient:
    """Minimal Gemini `generateContent` client.

    Attributes:
        api_key: API key; an empty key leaves the client unconfigured.
        model: Model name substituted into `api_url`.
        api_url: Endpoint template containing a `{model}` placeholder.
        timeout_seconds: Request timeout.
        generation_config: Sampling parameters.
    """

    api_key: str
    model: str
    api_url: str
    timeout_seconds: float = 60
    generation_config: GenerationConfig = field(default_factory=GenerationConfig)

    @classmethod
    def from_settings(cls) -> GenerativeAIClient:
        """Build a client from the `GEMINI_*` Django settings."""

        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            api_url=settings.GEMINI_API_URL,
            timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        """Return True when an API key is available."""

        return bool((self.api_key or "").strip())

    @property
    def endpoint(self) -> str:
        """Return the resolved endpoint URL for the configured model."""

        return self.api_url.format(model=self.model)

    def generate(self, prompt: str) -> str:
        """Send a prompt and return the generated text.

        Args:
            prompt: Prompt text.

        Returns:
            Text of the first candidate.

        Raises:
            AIServiceUnavailable: When no API key is configured.
            AIServiceError: On transport errors, HTTP errors or a response
                without text.
        """

        if not self.configured:
            raise AIServiceUnavailable("AI service is not configured.")

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": self.generation_config.as_payload(),
        }
        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            raise AIServiceError(f"AI service request failed: {exc.__class__.__name__}") from exc
        except ValueError as exc:
            raise AIServiceError("AI service returned invalid JSON.") from exc

        text = _candidate_text(body)
        if not text:
            raise AIServiceError(NO_RESPONSE_MESSAGE)
        return text


def _candidate_text(body: object) -> str:
    """Extract the text of the first candidate from a response body."""

    if not isinstance(body, dict):
        return ""
    candidates = body.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(str(part.get("text") or "") for part in parts if isinstance(part, dict)).strip()


def analyze_text(
    text: str,
    prompt: str = DEFAULT_ANALYZE_PROMPT,
    *,
    client: GenerativeAIClient | None = None,
) -> str:
    """Ask the model to analyze a piece of text.

    Returns:
        The analysis, or a message describing why it failed.
    """

    if not isinstance(text, str) or not text.strip():
        return "An error occurred during analysis: the input text is empty."
    client = client or GenerativeAIClient.from_settings()
    try:
        return client.generate(f"{prompt}\n\n{text}")
    except AIServiceError as exc:
        logger.warning("Text analysis failed: %s", exc)
        return f"An error occurred during analysis: {exc}"


def summarize_text(text: str, max_words: int = 200, *, client: GenerativeAIClient | None = None) -> str:
    """Ask the model for a summary of at most roughly `max_words` words.

    Returns:
        The summary, or a message describing why it failed.
    """

    if not isinstance(text, str) or not text.strip():
        return "An error occurred during summarization: the input text is empty."
    client = client or GenerativeAIClient.from_settings()
    try:
        return client.generate(f"Summarize the following text in about {max_words} words or fewer:\n\n{text}")
    except AIServiceError as exc:
        logger.warning("Text summarization failed: %s", exc)
        return f"An error occurred during summarization: {exc}"


def extract_keywords(text: str, count: int = 5, *, client: GenerativeAIClient | None = None) -> list[str]:
    """Ask the model for the most important keywords of a text.

    Returns:
        Up to `count` keywords; an empty list on failure.
    """

    if not isinstance(text, str) or not text.strip():
        return []
    client = client or GenerativeAIClient.from_settings()
    prompt = (
        f"Extract the {count} most important keywords from the following text. "
        f"Reply with a comma-separated list only:\n\n{text}"
    )
    try:
        reply = client.generate(prompt)
    except AIServiceError as exc:
        logger.warning("Keyword extraction failed: %s", exc)
        return []
    keywords = [word.strip() for word in reply.split(",") if word.strip()]
    return keywords[:count]


def generate_survey_report(
    survey_title: str,
    analysis: SurveyAnalysis,
    *,
    client: GenerativeAIClient | None = None,
) -> AIReport:
    """Generate the narrative AI report for a survey analysis.

    Args:
        survey_title: Title of the analyzed survey.
        analysis: Statistical analysis of the survey.
        client: Optional client; defaults to one built from settings.

    Returns:
        AIReport with the report text, or with `error` populated and a
        user-facing "Analysis unavailable" message.
    """

    prompt = build_report_prompt(survey_title, analysis)
    client = client or GenerativeAIClient.from_settings()
    try:
        text = client.generate(prompt)
    except AIServiceUnavailable as exc:
        logger.warning("AI report skipped for %r: %s", survey_title, exc)
        return AIReport(text=f"Analysis unavailable: {exc}", prompt=prompt, error=str(exc))
    except AIServiceError as exc:
        logger.exception("AI report failed for %r", survey_title)
        return AIReport(text=f"Analysis unavailable: {exc}", prompt=prompt, error=str(exc))

    logger.info("AI report generated for %r (%d characters)", survey_title, len(text))
    return AIReport(text=text, prompt=prompt)
