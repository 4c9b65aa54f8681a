from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, TimeOffType


@dataclass(frozen=True)
class TimeOffRequest:
    request_id: int
    worker_id: int
    request_type: TimeOffType
    start_date: date
    end_date: date
    paid_hours: float
    unpaid_hours: float
    status: RequestStatus
    created_at: datetime
    comments: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    denial_reason: Optional[str] = None
    # Joined for display; not stored on the row.
    worker_name: Optional[str] = None
    reviewer_name: Optional[str] = None
