from __future__ import annotations

from datetime import datetime

import pytest

from rome_timeclock.core.enums import PunchType
from rome_timeclock.core.exceptions import ValidationError
from rome_timeclock.punches.memory_punch_repository import InMemoryPunchRepository
from rome_timeclock.punches.service import PunchService

from conftest import FakeClock


def _service(now=datetime(2026, 3, 4, 8, 0)):
    clock = FakeClock(now)
    return PunchService(InMemoryPunchRepository(), clock=clock), clock


def test_clock_in_then_out_produces_one_pair_with_exact_delta():
    svc, clock = _service()

    punch_in = svc.clock_in(1)
    clock.advance(hours=7, minutes=42, seconds=3)
    punch_out, worked_ms = svc.clock_out(1)

    pairs = svc.history(1)
    assert len(pairs) == 1
    expected = (punch_out.punched_at - punch_in.punched_at).total_seconds() * 1000
    assert pairs[0].total_ms == expected
    assert worked_ms == expected


def test_double_clock_in_is_rejected():
    svc, _ = _service()
    svc.clock_in(1)

    with pytest.raises(ValidationError):
        svc.clock_in(1)


def test_clock_out_without_clock_in_is_rejected():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.clock_out(1)


def test_status_follows_latest_punch():
    svc, clock = _service()
    assert svc.get_status(1).is_clocked_in is False

    svc.clock_in(1)
    status = svc.get_status(1)
    assert status.is_clocked_in is True
    assert status.clock_in_time == datetime(2026, 3, 4, 8, 0)
    assert status.last_punch.punch_type == PunchType.IN

    clock.advance(hours=1)
    svc.clock_out(1)
    status = svc.get_status(1)
    assert status.is_clocked_in is False
    assert status.clock_in_time is None
    assert status.last_punch.punch_type == PunchType.OUT


def test_workers_do_not_share_status():
    svc, _ = _service()
    svc.clock_in(1)

    assert svc.get_status(2).is_clocked_in is False


def test_history_window_starts_at_midnight_days_ago():
    svc, clock = _service(datetime(2026, 2, 25, 8, 0))
    svc.clock_in(1)
    clock.advance(hours=8)
    svc.clock_out(1)

    clock.now = datetime(2026, 3, 4, 8, 0)
    assert len(svc.history(1, days=7)) == 1
    assert svc.history(1, days=6) == []


def test_weekly_hours_only_counts_current_week():
    svc, clock = _service(datetime(2026, 2, 27, 8, 0))  # previous Friday
    svc.clock_in(1)
    clock.advance(hours=8)
    svc.clock_out(1)

    clock.now = datetime(2026, 3, 2, 8, 0)  # Monday
    svc.clock_in(1)
    clock.advance(hours=6)
    svc.clock_out(1)

    clock.now = datetime(2026, 3, 4, 12, 0)
    weekly = svc.weekly_hours(1)
    assert weekly["total_hours"] == 6
    assert weekly["daily_hours"] == {"Mon": 6.0}


def test_history_rejects_non_positive_days():
    svc, _ = _service()

    with pytest.raises(ValidationError):
        svc.history(1, days=0)


def test_history_window_is_capped_at_a_year():
    svc, _ = _service()

    assert svc.history(1, days=366) == []
    with pytest.raises(ValidationError, match="days cannot exceed 366."):
        svc.history(1, days=1_000_000)
