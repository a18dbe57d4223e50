"""Calendar arithmetic relative to a project's event date."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def _to_utc_date(event_date: str) -> Optional[date]:
    text = event_date.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def add_offset(event_date: Optional[str], offset_days: int) -> Optional[str]:
    """Shift ``event_date`` by ``offset_days`` and return ``YYYY-MM-DD``.

    Returns ``None`` if the event date is missing or not a valid date.
    Datetimes carrying an offset are converted to UTC before the date is taken.
    """

    if not event_date:
        return None
    base = _to_utc_date(event_date)
    if base is None:
        return None
    try:
        return (base + timedelta(days=offset_days)).isoformat()
    except OverflowError:
        return None
