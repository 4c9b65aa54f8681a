from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.logger import get_logger
from ..common.validators import optional_text, require_non_negative
from ..core.constants import DEFAULT_REQUEST_LIMIT
from ..core.enums import MANAGER_ROLES, RequestStatus, Role, TimeOffType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.email import EmailSender
from ..workers.repository import WorkerRepository
from .model import TimeOffRequest
from .repository import TimeOffRepository

logger = get_logger(__name__)


def _as_date(value, field_name: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(value.strip())
    except (AttributeError, ValueError):
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD).")


class TimeOffService:
    """Use case: submit time-off requests and review them (managers, supervisors)."""

    def __init__(
        self,
        requests: TimeOffRepository,
        workers: WorkerRepository,
        email: EmailSender,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._workers = workers
        self._email = email
        self._clock = clock

    def submit(
        self,
        *,
        worker_id: int,
        request_type: str,
        start_date,
        end_date,
        paid_hours=0,
        unpaid_hours=0,
        comments: Optional[str] = None,
    ) -> TimeOffRequest:
        try:
            kind = TimeOffType(request_type)
        except ValueError:
            raise ValidationError("Unknown time off type.")

        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after start date.")

        paid = require_non_negative(paid_hours, "Paid hours")
        unpaid = require_non_negative(unpaid_hours, "Unpaid hours")

        request_id = self._requests.create(
            worker_id=int(worker_id),
            request_type=kind,
            start_date=start,
            end_date=end,
            paid_hours=paid,
            unpaid_hours=unpaid,
            comments=optional_text(comments, "Comments"),
            created_at=self._clock(),
        )
        logger.info("Time off request %s submitted by worker %s", request_id, worker_id)
        return self._requests.get(request_id)

    def my_requests(self, worker_id: int) -> list[TimeOffRequest]:
        return list(self._requests.list_for_worker(int(worker_id)))

    def pending(self, *, current_role: Role) -> list[TimeOffRequest]:
        self._require_reviewer(current_role)
        return list(self._requests.list_pending())

    def all_requests(self, *, current_role: Role, limit: int = DEFAULT_REQUEST_LIMIT) -> list[TimeOffRequest]:
        self._require_reviewer(current_role)
        return list(self._requests.list_all(limit=int(limit)))

    def approve(self, *, current_role: Role, request_id: int, reviewer_id: int) -> TimeOffRequest:
        return self._decide(
            current_role=current_role,
            request_id=request_id,
            reviewer_id=reviewer_id,
            status=RequestStatus.APPROVED,
        )

    def deny(
        self,
        *,
        current_role: Role,
        request_id: int,
        reviewer_id: int,
        reason: Optional[str] = None,
    ) -> TimeOffRequest:
        return self._decide(
            current_role=current_role,
            request_id=request_id,
            reviewer_id=reviewer_id,
            status=RequestStatus.DENIED,
            denial_reason=optional_text(reason, "Reason"),
        )

    @staticmethod
    def _require_reviewer(current_role: Role) -> None:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("Only managers can review time off requests.")

    def _decide(
        self,
        *,
        current_role: Role,
        request_id: int,
        reviewer_id: int,
        status: RequestStatus,
        denial_reason: Optional[str] = None,
    ) -> TimeOffRequest:
        self._require_reviewer(current_role)

        existing = self._requests.get(int(request_id))
        if not existing:
            raise NotFoundError("Request not found")
        if existing.status != RequestStatus.PENDING:
            raise ValidationError("This request has already been reviewed.")

        decided = self._requests.decide(
            request_id=int(request_id),
            status=status,
            reviewed_by=int(reviewer_id),
            reviewed_at=self._clock(),
            denial_reason=denial_reason,
        )
        if not decided:
            # Another reviewer got there first.
            raise ValidationError("This request has already been reviewed.")

        request = self._requests.get(int(request_id))
        logger.info("Time off request %s %s by worker %s", request_id, status.value, reviewer_id)
        self._notify(request)
        return request

    def _notify(self, request: TimeOffRequest) -> None:
        worker = self._workers.get_by_id(request.worker_id)
        if not worker or not worker.email or not worker.email_notifications_enabled:
            return
        try:
            self._email.send_time_off_decision(
                to=worker.email,
                worker_name=worker.full_name,
                request_type=request.request_type.value,
                start_date=request.start_date,
                end_date=request.end_date,
                status=request.status.value,
                reviewer_name=request.reviewer_name,
                denial_reason=request.denial_reason,
            )
        except Exception:
            # The decision stands even if the email does not go out.
            logger.exception("Time off notification for request %s failed", request.request_id)

    @staticmethod
    def to_view(r: TimeOffRequest) -> dict:
        return {
            "id": r.request_id,
            "worker_id": r.worker_id,
            "worker_name": r.worker_name,
            "type": r.request_type.value,
            "start_date": r.start_date.isoformat(),
            "end_date": r.end_date.isoformat(),
            "paid_hours": r.paid_hours,
            "unpaid_hours": r.unpaid_hours,
            "comments": r.comments,
            "status": r.status.value,
            "reviewed_by": r.reviewed_by,
            "reviewer_name": r.reviewer_name,
            "reviewed_at": r.reviewed_at.isoformat() if r.reviewed_at else None,
            "denial_reason": r.denial_reason,
            "created_at": r.created_at.isoformat() if r.created_at else None,
        }
