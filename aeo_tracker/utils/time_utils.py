"""
Time and date utilities for the trailing observation window.

Key concepts:
  - Calendar days are always UTC days; naive datetimes are read as UTC.
  - The dashboard window is a trailing lower bound (``now - window_days``).
  - Synthetic checks are laid out over the trailing N calendar days,
    today inclusive.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime (naive input is assumed UTC)."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def utc_day(moment: datetime) -> date:
    """Truncate a timestamp to its UTC calendar day."""
    return as_utc(moment).date()


def window_start(now: datetime, window_days: int) -> datetime:
    """Return the lower bound of a trailing window of ``window_days`` days.

    Args:
        now: Reference instant (end of the window).
        window_days: Window length in days; must be >= 1.

    Returns:
        ``now - window_days`` as an aware UTC datetime.

    Raises:
        ValueError: If ``window_days < 1``.
    """
    if window_days < 1:
        raise ValueError(f"window_days must be >= 1, got {window_days}.")
    return as_utc(now) - timedelta(days=window_days)


def trailing_days(today: date, days: int) -> list[date]:
    """Return the ``days`` calendar days ending at ``today``, oldest first.

    ``today`` is always the last element, so a 14-day span covers today and
    the 13 days before it.

    Raises:
        ValueError: If ``days < 1``.
    """
    if days < 1:
        raise ValueError(f"days must be >= 1, got {days}.")
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
