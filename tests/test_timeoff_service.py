from __future__ import annotations

from datetime import date, datetime

import pytest

from rome_timeclock.common.security import pin_digest
from rome_timeclock.core.enums import RequestStatus, Role, TimeOffType
from rome_timeclock.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from rome_timeclock.timeoff.memory_timeoff_repository import InMemoryTimeOffRepository
from rome_timeclock.timeoff.service import TimeOffService
from rome_timeclock.workers.memory_worker_repository import InMemoryWorkerRepository

from conftest import FakeClock, RecordingEmail

WORKER_ID = 1
MANAGER_ID = 2


@pytest.fixture
def workers():
    repo = InMemoryWorkerRepository()
    repo.create_worker(
        pin_digest=pin_digest("123456", pepper="p"),
        full_name="John Smith",
        role=Role.WORKER,
        email="john.smith@example.com",
    )
    repo.create_worker(
        pin_digest=pin_digest("567890", pepper="p"),
        full_name="Michael Brown",
        role=Role.MANAGER,
        email="michael.brown@example.com",
    )
    return repo


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 4, 9, 0))


@pytest.fixture
def email():
    return RecordingEmail()


@pytest.fixture
def svc(workers, clock, email):
    return TimeOffService(InMemoryTimeOffRepository(workers), workers, email, clock=clock)


def _submit(svc, **overrides):
    data = dict(
        worker_id=WORKER_ID,
        request_type="vacation",
        start_date="2026-03-16",
        end_date="2026-03-18",
        paid_hours=24,
        unpaid_hours=0,
        comments="Family trip",
    )
    data.update(overrides)
    return svc.submit(**data)


def test_submitted_request_is_pending_in_own_list(svc):
    created = _submit(svc)

    mine = svc.my_requests(WORKER_ID)
    assert [r.request_id for r in mine] == [created.request_id]
    assert mine[0].status == RequestStatus.PENDING
    assert mine[0].start_date == date(2026, 3, 16)
    assert mine[0].comments == "Family trip"


def test_approve_sets_status_and_reviewer(svc, clock):
    created = _submit(svc)

    decided = svc.approve(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID)

    assert decided.status == RequestStatus.APPROVED
    assert decided.reviewed_by == MANAGER_ID
    assert decided.reviewer_name == "Michael Brown"
    assert decided.reviewed_at == clock.now


def test_deny_without_reason_still_denies(svc):
    created = _submit(svc)

    decided = svc.deny(current_role=Role.SUPERVISOR, request_id=created.request_id, reviewer_id=MANAGER_ID)

    assert decided.status == RequestStatus.DENIED
    assert decided.denial_reason is None


def test_deny_keeps_reason(svc):
    created = _submit(svc)

    decided = svc.deny(
        current_role=Role.MANAGER,
        request_id=created.request_id,
        reviewer_id=MANAGER_ID,
        reason="  Peak season ",
    )

    assert decided.denial_reason == "Peak season"


def test_decisions_are_final(svc):
    created = _submit(svc)
    svc.approve(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID)

    with pytest.raises(ValidationError, match="already been reviewed"):
        svc.deny(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID)
    assert svc.my_requests(WORKER_ID)[0].status == RequestStatus.APPROVED


def test_repository_decide_only_moves_pending_rows(workers, clock):
    repo = InMemoryTimeOffRepository(workers)
    request_id = repo.create(
        worker_id=WORKER_ID,
        request_type=TimeOffType.SICK,
        start_date=date(2026, 3, 5),
        end_date=date(2026, 3, 5),
        paid_hours=8,
        unpaid_hours=0,
        comments=None,
        created_at=clock.now,
    )

    first = repo.decide(
        request_id=request_id, status=RequestStatus.APPROVED, reviewed_by=MANAGER_ID, reviewed_at=clock.now
    )
    second = repo.decide(
        request_id=request_id, status=RequestStatus.DENIED, reviewed_by=MANAGER_ID, reviewed_at=clock.now
    )

    assert first is True
    assert second is False
    assert repo.get(request_id).status == RequestStatus.APPROVED


def test_workers_cannot_review(svc):
    created = _submit(svc)

    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.WORKER, request_id=created.request_id, reviewer_id=WORKER_ID)
    with pytest.raises(AuthorizationError):
        svc.pending(current_role=Role.WORKER)


def test_unknown_request(svc):
    with pytest.raises(NotFoundError):
        svc.approve(current_role=Role.MANAGER, request_id=999, reviewer_id=MANAGER_ID)


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"request_type": "holiday"}, "Unknown time off type."),
        ({"start_date": "2026-03-18", "end_date": "2026-03-16"}, "End date must be on or after start date."),
        ({"start_date": "03/16/2026"}, "Start date must be a date"),
        ({"paid_hours": -1}, "Paid hours cannot be negative."),
        ({"unpaid_hours": "lots"}, "Unpaid hours must be a number."),
        ({"paid_hours": "Infinity"}, "Paid hours must be a number."),
        ({"unpaid_hours": float("nan")}, "Unpaid hours must be a number."),
        ({"paid_hours": 10000}, "Paid hours cannot exceed"),
        ({"start_date": 20260316}, "Start date must be a date"),
        ({"comments": ["a", "b"]}, "Comments must be text."),
    ],
)
def test_submit_validation(svc, overrides, message):
    with pytest.raises(ValidationError, match=message):
        _submit(svc, **overrides)


def test_single_day_request_allowed(svc):
    created = _submit(svc, start_date="2026-03-16", end_date="2026-03-16")

    assert created.start_date == created.end_date


def test_pending_oldest_first_and_all_newest_first(svc, clock):
    first = _submit(svc)
    clock.advance(minutes=5)
    second = _submit(svc, request_type="sick")

    pending = svc.pending(current_role=Role.MANAGER)
    assert [r.request_id for r in pending] == [first.request_id, second.request_id]
    assert pending[0].worker_name == "John Smith"

    everything = svc.all_requests(current_role=Role.MANAGER)
    assert [r.request_id for r in everything] == [second.request_id, first.request_id]


def test_decision_emails_worker(svc, email):
    created = _submit(svc)

    svc.deny(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID, reason="Short staffed")

    assert len(email.decisions) == 1
    sent = email.decisions[0]
    assert sent["to"] == "john.smith@example.com"
    assert sent["status"] == "denied"
    assert sent["reviewer_name"] == "Michael Brown"
    assert sent["denial_reason"] == "Short staffed"


def test_no_email_when_notifications_disabled(svc, workers, email):
    workers.update_notification_preference(WORKER_ID, enabled=False)
    created = _submit(svc)

    svc.approve(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID)

    assert email.decisions == []


def test_email_failure_does_not_undo_decision(workers, clock):
    failing = RecordingEmail(fail_with=RuntimeError("smtp down"))
    svc = TimeOffService(InMemoryTimeOffRepository(workers), workers, failing, clock=clock)
    created = _submit(svc)

    decided = svc.approve(current_role=Role.MANAGER, request_id=created.request_id, reviewer_id=MANAGER_ID)

    assert decided.status == RequestStatus.APPROVED
    assert svc.my_requests(WORKER_ID)[0].status == RequestStatus.APPROVED
