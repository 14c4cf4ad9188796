"""ASGI entry point for async-capable servers."""

from __future__ import annotations

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "surveyInsights.settings")

application = get_asgi_application()

