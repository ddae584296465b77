from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"日付の形式が正しくありません: {value}")


def parse_iso_datetime(value: str, *, tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Parse an ISO-8601 timestamp into naive wall-clock time of ``tz_name``.

    Offsets (``+09:00``, ``Z``) are converted; naive input is taken as already local.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"日時の形式が正しくありません: {value}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(tz_name)).replace(tzinfo=None)
    return parsed


def now_local(tz_name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time (naive) in the configured zone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValidationError("月は1〜12で指定してください")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
