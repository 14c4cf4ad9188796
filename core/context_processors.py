"""Template context processors for Survey Insights."""

from __future__ import annotations

from django.conf import settings
from django.http import HttpRequest


def ai_service(request: HttpRequest) -> dict[str, bool]:
    """Expose whether AI reports are available to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `ai_enabled` boolean.
    """

    return {"ai_enabled": bool((getattr(settings, "GEMINI_API_KEY", "") or "").strip())}
