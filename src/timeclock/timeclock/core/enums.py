from __future__ import annotations

from enum import Enum


class ShiftStatus(str, Enum):
    """Lifecycle of a shift record as stored in the database."""

    WORKING = "working"
    COMPLETED = "completed"


class ReportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
