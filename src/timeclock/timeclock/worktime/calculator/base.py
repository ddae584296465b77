from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ..model import WorkTimeResult


class WorkTimeCalculator(ABC):
    """Calculator interface (Strategy Pattern for break deduction)."""

    @abstractmethod
    def calculate(self, clock_in: datetime, clock_out: datetime) -> WorkTimeResult:
        raise NotImplementedError
