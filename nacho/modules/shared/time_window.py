"""
Time Window Policy

Purpose
-------
Shared wall-clock rules used across the engine:
- is a recurring mission available today
- was it already completed today
- has a buff expired
- has a day boundary passed since a reference time

Design Notes
------------
- Every rule is recomputed from its inputs on each call. "Today" changes
  without any event, so nothing here caches.
- Datetimes are normalised to aware UTC before comparison; calendar days
  are UTC days.
- Weekdays use the 0 = Sunday .. 6 = Saturday convention.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Union

from nacho.domain.models.base import ensure_utc, utc_now
from nacho.domain.models.mission import Mission, MissionFrequency
from nacho.domain.models.player import ActiveBuff

DateLike = Union[date, datetime]


def to_date(value: DateLike) -> date:
    """Calendar (UTC) date of a date or datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def weekday_index(value: DateLike) -> int:
    """
    Weekday with Sunday = 0.

    Example:
        >>> weekday_index(date(2024, 1, 7))  # a Sunday
        0
        >>> weekday_index(date(2024, 1, 10))  # a Wednesday
        3
    """
    return to_date(value).isoweekday() % 7


def is_available_today(mission: Mission, today: DateLike) -> bool:
    """Daily missions always; weekly missions on their scheduled weekdays."""
    if mission.frequency is MissionFrequency.DAILY:
        return True
    return weekday_index(today) in mission.days_of_week


def is_completed_today(mission: Mission, now: Optional[datetime] = None) -> bool:
    """Same calendar day as the last completion (not a 24h window)."""
    if mission.last_completed_at is None:
        return False
    now = now or utc_now()
    return to_date(mission.last_completed_at) == to_date(now)


def can_complete(mission: Mission, now: Optional[datetime] = None) -> bool:
    now = now or utc_now()
    if not is_available_today(mission, now):
        return False
    return not mission.is_daily or not is_completed_today(mission, now)


def previous_scheduled_date(mission: Mission, today: DateLike, lookback_days: int = 7) -> date:
    """
    Most recent day strictly before `today` the mission was due.

    Missions without scheduled weekdays were due yesterday. When no
    scheduled day is found inside `lookback_days`, yesterday is used.
    """
    current = to_date(today)
    yesterday = current - timedelta(days=1)
    if not mission.days_of_week:
        return yesterday

    for days_back in range(1, lookback_days + 1):
        candidate = current - timedelta(days=days_back)
        if weekday_index(candidate) in mission.days_of_week:
            return candidate
    return yesterday


def is_buff_active(buff: ActiveBuff, now: Optional[datetime] = None) -> bool:
    """A buff is live while `expires_at > now`; at the instant of expiry it is gone."""
    now = ensure_utc(now or utc_now())
    return ensure_utc(buff.expires_at) > now


def is_new_day(last: Optional[DateLike], now: Optional[datetime] = None) -> bool:
    """True when `now` falls on a later calendar day than `last` (or no `last`)."""
    if last is None:
        return True
    now = now or utc_now()
    return to_date(now) > to_date(last)


def is_yesterday(value: Optional[DateLike], now: Optional[datetime] = None) -> bool:
    if value is None:
        return False
    now = now or utc_now()
    return to_date(value) == to_date(now) - timedelta(days=1)
