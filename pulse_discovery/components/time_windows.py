"""
Day-window resolution for the listing day filter.

A window is the half-open interval ``[start, end)`` a symbolic day key
(``today``, ``thisWeekend``, ...) or an explicit ``YYYY-MM-DD`` date
resolves to, relative to a caller-supplied local ``now``.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..models.filter import DATE_KEY_PATTERN

logger = logging.getLogger(__name__)

FRIDAY = 4
SUNDAY = 6

HAPPENING_NOW_HOURS = 2
UPCOMING_DAYS = 30


@dataclass(frozen=True)
class TimeWindow:
    """
    Half-open instant interval.

    ``start``/``end`` of None mean unbounded on that side. ``not_before``
    is an extra lower clamp applied by ``contains`` while the nominal
    ``start`` is kept for display (e.g. the weekend still "starts" Friday).
    """

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    not_before: Optional[datetime] = None

    @property
    def effective_start(self) -> Optional[datetime]:
        if self.start is None:
            return self.not_before
        if self.not_before is None:
            return self.start
        return max(self.start, self.not_before)

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None and self.not_before is None

    def contains(self, instant: datetime) -> bool:
        """Check whether an instant falls inside the window."""
        lower = self.effective_start
        if lower is not None and instant < lower:
            return False
        if self.end is not None and instant >= self.end:
            return False
        return True


UNBOUNDED = TimeWindow()


def start_of_day(moment: datetime) -> datetime:
    """Local midnight of the moment's calendar day."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def parse_date_key(key: str) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` key into a date, or None if it is not one."""
    if not isinstance(key, str) or not DATE_KEY_PATTERN.match(key):
        return None

    year, month, day = (int(part) for part in key.split("-"))
    try:
        return date(year, month, day)
    except ValueError:
        logger.debug(f"Ignoring impossible calendar date: {key}")
        return None


def resolve_day_window(
    key: str,
    now: datetime,
    happening_now_hours: int = HAPPENING_NOW_HOURS,
    upcoming_days: int = UPCOMING_DAYS,
) -> TimeWindow:
    """
    Resolve a day-filter key to a time window relative to ``now``.

    Args:
        key: Symbolic day key or an explicit ``YYYY-MM-DD`` date
        now: Current instant in the target local timezone
        happening_now_hours: Look-back for ``happeningNow``
        upcoming_days: Look-ahead for ``today`` (labelled "Upcoming")

    Returns:
        TimeWindow; unknown keys resolve to an unbounded window
    """
    midnight = start_of_day(now)
    weekday = now.weekday()

    if key == "anytime":
        return TimeWindow(start=now)

    if key == "happeningNow":
        return TimeWindow(start=now - timedelta(hours=happening_now_hours), end=now)

    if key == "today":
        return TimeWindow(start=now, end=now + timedelta(days=upcoming_days))

    if key == "tomorrow":
        tomorrow = midnight + timedelta(days=1)
        return TimeWindow(start=tomorrow, end=tomorrow + timedelta(days=1))

    if key == "thisWeekend":
        if weekday >= FRIDAY:
            # Already inside the weekend: nominal start stays Friday, clamp to now.
            friday = midnight - timedelta(days=weekday - FRIDAY)
            return TimeWindow(
                start=friday, end=friday + timedelta(days=3), not_before=now
            )
        friday = midnight + timedelta(days=FRIDAY - weekday)
        return TimeWindow(start=friday, end=friday + timedelta(days=3))

    if key == "thisWeek":
        # Ends at the Monday midnight after the coming Sunday. On a Sunday
        # the window runs through the following Sunday.
        days_until_sunday = (SUNDAY - weekday) or 7
        monday = midnight + timedelta(days=days_until_sunday + 1)
        return TimeWindow(start=now, end=monday)

    if key == "nextWeek":
        next_monday = midnight + timedelta(days=7 - weekday)
        return TimeWindow(start=next_monday, end=next_monday + timedelta(days=7))

    explicit = parse_date_key(key)
    if explicit is not None:
        day_start = midnight + timedelta(days=(explicit - now.date()).days)
        window_end = day_start + timedelta(days=1)
        if explicit == now.date():
            return TimeWindow(start=day_start, end=window_end, not_before=now)
        return TimeWindow(start=day_start, end=window_end)

    logger.debug(f"Unrecognized day filter '{key}', passing all listings through")
    return UNBOUNDED
