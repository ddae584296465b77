from __future__ import annotations

import math
from datetime import datetime

from ...core.constants import (
    LONG_SHIFT_BREAK_MINUTES,
    LONG_SHIFT_MINUTES,
    MEDIUM_SHIFT_BREAK_MINUTES,
    MEDIUM_SHIFT_MINUTES,
    MINUTES_PER_DAY,
    SHORT_SHIFT_MINUTES,
)
from ..model import WorkTimeResult
from .base import WorkTimeCalculator


class TieredBreakCalculator(WorkTimeCalculator):
    """Deduct an automatic break depending on how long the shift lasted.

    Rules (elapsed minutes ``T``, lower bound inclusive):

    - ``T < 6h``: no break, work = T
    - ``6h <= T < 6h15m``: no break, work is credited as exactly 6h
    - ``6h15m <= T < 8h``: 45 minute break
    - ``T >= 8h``: 60 minute break

    A clock-out earlier than the clock-in is read as a shift that crossed
    midnight; one day is added and the result is flagged overnight. Shifts are
    assumed to last less than 24 hours.
    """

    def calculate(self, clock_in: datetime, clock_out: datetime) -> WorkTimeResult:
        total_minutes = (clock_out - clock_in).total_seconds() / 60

        is_overnight = total_minutes < 0
        if is_overnight:
            total_minutes += MINUTES_PER_DAY

        if total_minutes >= LONG_SHIFT_MINUTES:
            break_minutes = LONG_SHIFT_BREAK_MINUTES
            work_minutes = math.floor(total_minutes) - break_minutes
        elif total_minutes >= MEDIUM_SHIFT_MINUTES:
            break_minutes = MEDIUM_SHIFT_BREAK_MINUTES
            work_minutes = math.floor(total_minutes) - break_minutes
        elif total_minutes >= SHORT_SHIFT_MINUTES:
            # Dead zone before the 45 minute tier: credited as a flat 6h.
            break_minutes = 0
            work_minutes = SHORT_SHIFT_MINUTES
        else:
            break_minutes = 0
            work_minutes = math.floor(total_minutes)

        return WorkTimeResult(
            work_minutes=max(work_minutes, 0),
            break_minutes=break_minutes,
            is_overnight=is_overnight,
        )


_default_calculator = TieredBreakCalculator()


def calculate_work_time(clock_in: datetime, clock_out: datetime) -> WorkTimeResult:
    return _default_calculator.calculate(clock_in, clock_out)


def is_overtime(work_minutes: int) -> bool:
    """True when more than a full day of work is recorded for one shift."""
    return work_minutes > MINUTES_PER_DAY
