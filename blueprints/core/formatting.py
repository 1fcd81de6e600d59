from __future__ import annotations
from datetime import date, datetime, time

def fmt_time(value: time | None) -> str | None:
    if value is None:
        return None
    return value.strftime("%H:%M")

def fmt_date(value: date | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()

def fmt_dt(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat(timespec="seconds") + "Z"
