from __future__ import annotations

from typing import Optional

from ..core.constants import MINUTES_PER_HOUR

EMPTY = "-"


def format_minutes(minutes: Optional[int]) -> str:
    """Render minutes as ``H:MM`` (e.g. 90 -> ``1:30``), ``-`` when absent."""
    if minutes is None:
        return EMPTY
    hours, rest = divmod(int(minutes), MINUTES_PER_HOUR)
    return f"{hours}:{rest:02d}"


def format_minutes_localized(minutes: Optional[int]) -> str:
    """Render minutes as a Japanese phrase: ``1時間30分``, ``1時間``, ``30分``."""
    if minutes is None:
        return EMPTY
    hours, rest = divmod(int(minutes), MINUTES_PER_HOUR)
    if hours == 0:
        return f"{rest}分"
    if rest == 0:
        return f"{hours}時間"
    return f"{hours}時間{rest}分"
