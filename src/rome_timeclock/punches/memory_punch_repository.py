from __future__ import annotations

import itertools
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PunchType
from .model import Punch
from .repository import PunchRepository


class InMemoryPunchRepository(PunchRepository):
    def __init__(self):
        self._punches: list[Punch] = []
        self._ids = itertools.count(1)

    def append(self, *, worker_id: int, punch_type: PunchType, punched_at: datetime) -> int:
        punch = Punch(
            punch_id=next(self._ids),
            worker_id=int(worker_id),
            punch_type=punch_type,
            punched_at=punched_at,
        )
        self._punches.append(punch)
        return punch.punch_id

    def _for_worker(self, worker_id: int) -> list[Punch]:
        items = [p for p in self._punches if p.worker_id == int(worker_id)]
        items.sort(key=lambda p: (p.punched_at, p.punch_id))
        return items

    def latest_for_worker(self, worker_id: int) -> Optional[Punch]:
        items = self._for_worker(worker_id)
        return items[-1] if items else None

    def list_since(self, worker_id: int, since: datetime) -> Sequence[Punch]:
        return [p for p in self._for_worker(worker_id) if p.punched_at >= since]
