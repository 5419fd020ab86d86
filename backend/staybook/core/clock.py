"""Time source used wherever a request needs "today"."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

from staybook.core.config import get_settings


def today() -> date:
    """Return the current calendar date in the configured timezone."""
    settings = get_settings()
    return datetime.now(ZoneInfo(settings.default_timezone)).date()


__all__ = ["today"]
