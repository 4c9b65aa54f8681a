from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from ..common.datetime_utils import format_duration, now_local, start_of_week
from ..common.logger import get_logger
from ..core.constants import DEFAULT_HISTORY_DAYS, MAX_HISTORY_DAYS
from ..core.enums import PunchType
from ..core.exceptions import ValidationError
from .model import Punch, PunchPair, WorkerStatus
from .pairing import elapsed_ms, pair_by_day, weekly_totals
from .repository import PunchRepository

logger = get_logger(__name__)


class PunchService:
    def __init__(self, punches: PunchRepository, *, clock: Callable[[], datetime] = now_local):
        self._punches = punches
        self._clock = clock

    def get_status(self, worker_id: int) -> WorkerStatus:
        last = self._punches.latest_for_worker(int(worker_id))
        is_in = bool(last and last.punch_type == PunchType.IN)
        return WorkerStatus(
            is_clocked_in=is_in,
            clock_in_time=last.punched_at if is_in else None,
            last_punch=last,
        )

    def clock_in(self, worker_id: int) -> Punch:
        if self.get_status(worker_id).is_clocked_in:
            raise ValidationError("You are already clocked in.")

        now = self._clock()
        punch_id = self._punches.append(worker_id=int(worker_id), punch_type=PunchType.IN, punched_at=now)
        logger.info("Worker %s clocked in", worker_id)
        return Punch(punch_id=punch_id, worker_id=int(worker_id), punch_type=PunchType.IN, punched_at=now)

    def clock_out(self, worker_id: int) -> tuple[Punch, int]:
        """Returns the OUT punch and milliseconds since the matching IN."""
        status = self.get_status(worker_id)
        if not status.is_clocked_in:
            raise ValidationError("You are not clocked in.")

        now = self._clock()
        punch_id = self._punches.append(worker_id=int(worker_id), punch_type=PunchType.OUT, punched_at=now)
        worked_ms = max(elapsed_ms(status.clock_in_time, now), 0)
        logger.info("Worker %s clocked out after %s", worker_id, format_duration(worked_ms))
        return Punch(punch_id=punch_id, worker_id=int(worker_id), punch_type=PunchType.OUT, punched_at=now), worked_ms

    def history(self, worker_id: int, days: int = DEFAULT_HISTORY_DAYS) -> list[PunchPair]:
        days = int(days)
        if days < 1:
            raise ValidationError("days must be at least 1.")
        if days > MAX_HISTORY_DAYS:
            raise ValidationError(f"days cannot exceed {MAX_HISTORY_DAYS}.")
        midnight = datetime.combine(self._clock().date() - timedelta(days=days), datetime.min.time())
        return pair_by_day(self._punches.list_since(int(worker_id), midnight))

    def weekly_hours(self, worker_id: int) -> dict:
        week_start = start_of_week(self._clock())
        pairs = pair_by_day(self._punches.list_since(int(worker_id), week_start))
        return weekly_totals(pairs, week_start=week_start.date())

    @staticmethod
    def punch_view(p: Punch | None) -> dict | None:
        if not p:
            return None
        return {
            "id": p.punch_id,
            "worker_id": p.worker_id,
            "type": p.punch_type.value,
            "timestamp": p.punched_at.isoformat(),
        }

    @staticmethod
    def pair_view(pp: PunchPair) -> dict:
        return {
            "date": pp.work_date.isoformat(),
            "clock_in": pp.clock_in.isoformat() if pp.clock_in else None,
            "clock_out": pp.clock_out.isoformat() if pp.clock_out else None,
            "total_ms": pp.total_ms,
            "total": format_duration(pp.total_ms),
        }

    def status_view(self, worker_id: int) -> dict:
        status = self.get_status(worker_id)
        return {
            "is_clocked_in": status.is_clocked_in,
            "clock_in_time": status.clock_in_time.isoformat() if status.clock_in_time else None,
            "last_punch": self.punch_view(status.last_punch),
        }
