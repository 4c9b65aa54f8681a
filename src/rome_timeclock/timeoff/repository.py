from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, TimeOffType
from .model import TimeOffRequest


class TimeOffRepository(Protocol):
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
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[TimeOffRequest]:
        raise NotImplementedError

    def list_for_worker(self, worker_id: int) -> Sequence[TimeOffRequest]:
        """Newest first, with reviewer name."""

        raise NotImplementedError

    def list_pending(self) -> Sequence[TimeOffRequest]:
        """Oldest first, with worker name."""

        raise NotImplementedError

    def list_all(self, *, limit: int) -> Sequence[TimeOffRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        denial_reason: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to `status`. False if it was not pending."""

        raise NotImplementedError
