from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WorkTimeResult:
    """Outcome of closing a shift: credited work, deducted break, midnight crossing."""

    work_minutes: int
    break_minutes: int
    is_overnight: bool
