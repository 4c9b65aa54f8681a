from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PunchType


@dataclass(frozen=True)
class Punch:
    """A single clock event. Punches are never edited once written."""

    punch_id: int
    worker_id: int
    punch_type: PunchType
    punched_at: datetime


@dataclass(frozen=True)
class PunchPair:
    """Read-model: one calendar day of punches collapsed to first IN / last OUT."""

    work_date: date
    clock_in: Optional[datetime]
    clock_out: Optional[datetime]
    total_ms: int


@dataclass(frozen=True)
class WorkerStatus:
    is_clocked_in: bool
    clock_in_time: Optional[datetime]
    last_punch: Optional[Punch]
