from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, TimeOffType
from ..workers.repository import WorkerRepository
from .model import TimeOffRequest
from .repository import TimeOffRepository


class InMemoryTimeOffRepository(TimeOffRepository):
    """Demo-mode request store. Names are resolved on read like the SQL joins."""

    def __init__(self, workers: WorkerRepository):
        self._workers = workers
        self._requests: dict[int, TimeOffRequest] = {}
        self._ids = itertools.count(1)

    def _name(self, worker_id: Optional[int]) -> Optional[str]:
        if worker_id is None:
            return None
        worker = self._workers.get_by_id(worker_id)
        return worker.full_name if worker else None

    def _with_names(self, r: TimeOffRequest) -> TimeOffRequest:
        return replace(r, worker_name=self._name(r.worker_id), reviewer_name=self._name(r.reviewed_by))

    def create(
        self,
        *,
        worker_id: int,
        request_type: TimeOffType,
        start_date: date,
        end_date: date,
        paid_hours: float,
        unpaid_hours: float,
        comments: Optional[str],
        created_at: datetime,
    ) -> int:
        request_id = next(self._ids)
        self._requests[request_id] = TimeOffRequest(
            request_id=request_id,
            worker_id=int(worker_id),
            request_type=request_type,
            start_date=start_date,
            end_date=end_date,
            paid_hours=float(paid_hours),
            unpaid_hours=float(unpaid_hours),
            status=RequestStatus.PENDING,
            created_at=created_at,
            comments=comments,
        )
        return request_id

    def get(self, request_id: int) -> Optional[TimeOffRequest]:
        r = self._requests.get(int(request_id))
        return self._with_names(r) if r else None

    def _sorted(self, items, *, newest_first: bool) -> list[TimeOffRequest]:
        items = sorted(items, key=lambda r: (r.created_at, r.request_id), reverse=newest_first)
        return [self._with_names(r) for r in items]

    def list_for_worker(self, worker_id: int) -> Sequence[TimeOffRequest]:
        mine = [r for r in self._requests.values() if r.worker_id == int(worker_id)]
        return self._sorted(mine, newest_first=True)

    def list_pending(self) -> Sequence[TimeOffRequest]:
        pending = [r for r in self._requests.values() if r.status == RequestStatus.PENDING]
        return self._sorted(pending, newest_first=False)

    def list_all(self, *, limit: int) -> Sequence[TimeOffRequest]:
        return self._sorted(self._requests.values(), newest_first=True)[: int(limit)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        denial_reason: Optional[str] = None,
    ) -> bool:
        r = self._requests.get(int(request_id))
        if not r or r.status != RequestStatus.PENDING:
            return False
        self._requests[r.request_id] = replace(
            r,
            status=status,
            reviewed_by=int(reviewed_by),
            reviewed_at=reviewed_at,
            denial_reason=denial_reason,
        )
        return True
