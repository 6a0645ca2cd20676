from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def coerce_exam_date(value) -> date:
    """Accept a date, a datetime, a YYYY-MM-DD string or an ISO timestamp.

    Raises ValueError/TypeError when the value is not a calendar date.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"Unsupported date value: {type(value)!r}")

    text = value.strip()
    # Form pickers send either "2025-03-14" or "2025-03-14T00:00:00.000Z".
    if "T" in text:
        text = text.split("T", 1)[0]
    return parse_iso_date(text)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
