from __future__ import annotations
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app

def school_tz():
    name = current_app.config.get("SCHOOL_TIMEZONE", "Europe/Tallinn")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        try:
            import tzdata  # noqa
            return ZoneInfo(name)
        except (ImportError, ZoneInfoNotFoundError, ValueError):
            current_app.logger.warning("unknown SCHOOL_TIMEZONE %r, falling back to UTC", name)
            return timezone.utc

def school_now() -> datetime:
    return datetime.now(school_tz())

def school_today() -> date:
    return school_now().date()
