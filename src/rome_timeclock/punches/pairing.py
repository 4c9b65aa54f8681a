"""Pure functions turning a punch ledger into per-day hours."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, datetime
from typing import Iterable, Sequence

from ..core.enums import PunchType
from .model import Punch, PunchPair

_MS_PER_HOUR = 60 * 60 * 1000
_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def elapsed_ms(start: datetime, end: datetime) -> int:
    delta = end - start
    return (delta.days * 86400 + delta.seconds) * 1000 + delta.microseconds // 1000


def pair_by_day(punches: Iterable[Punch]) -> list[PunchPair]:
    """Group punches by calendar date of their timestamp.

    Each day keeps its first IN and its last OUT; `total_ms` is the gap between
    them, or 0 when either side is missing. Newest day first.
    """
    days: "OrderedDict[date, tuple[list[datetime], list[datetime]]]" = OrderedDict()
    for p in sorted(punches, key=lambda x: (x.punched_at, x.punch_id)):
        ins, outs = days.setdefault(p.punched_at.date(), ([], []))
        (ins if p.punch_type == PunchType.IN else outs).append(p.punched_at)

    pairs = []
    for work_date, (ins, outs) in days.items():
        clock_in = ins[0] if ins else None
        clock_out = outs[-1] if outs else None
        total_ms = max(0, elapsed_ms(clock_in, clock_out)) if clock_in and clock_out else 0
        pairs.append(PunchPair(work_date=work_date, clock_in=clock_in, clock_out=clock_out, total_ms=total_ms))

    pairs.sort(key=lambda pp: pp.work_date, reverse=True)
    return pairs


def weekly_totals(pairs: Sequence[PunchPair], *, week_start: date) -> dict:
    total_ms = 0
    daily_hours: dict[str, float] = {}
    for pp in pairs:
        if pp.work_date < week_start:
            continue
        total_ms += pp.total_ms
        day_name = _DAY_NAMES[pp.work_date.weekday()]
        daily_hours[day_name] = daily_hours.get(day_name, 0.0) + pp.total_ms / _MS_PER_HOUR

    return {
        "total_ms": total_ms,
        "total_hours": total_ms / _MS_PER_HOUR,
        "daily_hours": daily_hours,
    }
