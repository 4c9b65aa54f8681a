from __future__ import annotations

from datetime import date, datetime

from rome_timeclock.common.datetime_utils import format_duration, start_of_week
from rome_timeclock.core.enums import PunchType
from rome_timeclock.punches.model import Punch
from rome_timeclock.punches.pairing import elapsed_ms, pair_by_day, weekly_totals


def _punch(punch_id: int, kind: PunchType, at: datetime) -> Punch:
    return Punch(punch_id=punch_id, worker_id=1, punch_type=kind, punched_at=at)


def test_pair_uses_first_in_and_last_out_per_day():
    punches = [
        _punch(1, PunchType.IN, datetime(2026, 3, 2, 8, 0)),
        _punch(2, PunchType.OUT, datetime(2026, 3, 2, 12, 0)),
        _punch(3, PunchType.IN, datetime(2026, 3, 2, 12, 30)),
        _punch(4, PunchType.OUT, datetime(2026, 3, 2, 16, 30)),
    ]

    pairs = pair_by_day(punches)

    assert len(pairs) == 1
    assert pairs[0].clock_in == datetime(2026, 3, 2, 8, 0)
    assert pairs[0].clock_out == datetime(2026, 3, 2, 16, 30)
    assert pairs[0].total_ms == 8.5 * 3600 * 1000


def test_day_without_out_has_zero_total():
    pairs = pair_by_day([_punch(1, PunchType.IN, datetime(2026, 3, 3, 8, 0))])

    assert pairs[0].clock_out is None
    assert pairs[0].total_ms == 0


def test_overnight_out_before_in_does_not_go_negative():
    punches = [
        _punch(1, PunchType.OUT, datetime(2026, 3, 3, 6, 0)),
        _punch(2, PunchType.IN, datetime(2026, 3, 3, 22, 0)),
    ]

    pairs = pair_by_day(punches)

    assert pairs[0].total_ms == 0


def test_pairs_sorted_newest_day_first():
    punches = [
        _punch(1, PunchType.IN, datetime(2026, 3, 2, 8, 0)),
        _punch(2, PunchType.OUT, datetime(2026, 3, 2, 16, 0)),
        _punch(3, PunchType.IN, datetime(2026, 3, 3, 8, 0)),
        _punch(4, PunchType.OUT, datetime(2026, 3, 3, 15, 0)),
    ]

    pairs = pair_by_day(punches)

    assert [p.work_date for p in pairs] == [date(2026, 3, 3), date(2026, 3, 2)]


def test_weekly_totals_skip_days_before_monday():
    punches = [
        _punch(1, PunchType.IN, datetime(2026, 3, 1, 8, 0)),  # Sunday, previous week
        _punch(2, PunchType.OUT, datetime(2026, 3, 1, 12, 0)),
        _punch(3, PunchType.IN, datetime(2026, 3, 2, 8, 0)),
        _punch(4, PunchType.OUT, datetime(2026, 3, 2, 16, 0)),
        _punch(5, PunchType.IN, datetime(2026, 3, 3, 9, 0)),
        _punch(6, PunchType.OUT, datetime(2026, 3, 3, 13, 30)),
    ]

    totals = weekly_totals(pair_by_day(punches), week_start=date(2026, 3, 2))

    assert totals["total_ms"] == 12.5 * 3600 * 1000
    assert totals["total_hours"] == 12.5
    assert totals["daily_hours"] == {"Mon": 8.0, "Tue": 4.5}


def test_start_of_week_is_monday_midnight():
    assert start_of_week(datetime(2026, 3, 4, 9, 15)) == datetime(2026, 3, 2, 0, 0)
    assert start_of_week(datetime(2026, 3, 2, 0, 0)) == datetime(2026, 3, 2, 0, 0)
    assert start_of_week(datetime(2026, 3, 8, 23, 59)) == datetime(2026, 3, 2, 0, 0)


def test_format_duration():
    assert format_duration(0) == "0m"
    assert format_duration(45 * 60 * 1000) == "45m"
    assert format_duration((2 * 60 + 5) * 60 * 1000) == "2h 5m"


def test_elapsed_ms_keeps_millisecond_precision():
    assert elapsed_ms(datetime(2026, 3, 2, 8, 0, 0), datetime(2026, 3, 2, 8, 0, 1, 250000)) == 1250
