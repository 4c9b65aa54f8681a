from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, TimeOffType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeOffRequest
from .repository import TimeOffRepository

_SELECT = """
    SELECT r.request_id, r.worker_id, r.request_type, r.start_date, r.end_date,
           r.paid_hours, r.unpaid_hours, r.comments, r.status,
           r.reviewed_by, r.reviewed_at, r.denial_reason, r.created_at,
           w.full_name AS worker_name, rv.full_name AS reviewer_name
    FROM time_off_requests r
    JOIN workers w ON w.worker_id = r.worker_id
    LEFT JOIN workers rv ON rv.worker_id = r.reviewed_by
"""


def _to_request(r: dict) -> TimeOffRequest:
    return TimeOffRequest(
        request_id=int(r["request_id"]),
        worker_id=int(r["worker_id"]),
        request_type=TimeOffType(r["request_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        paid_hours=float(r.get("paid_hours") or 0),
        unpaid_hours=float(r.get("unpaid_hours") or 0),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        comments=r.get("comments"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") is not None else None,
        reviewed_at=r.get("reviewed_at"),
        denial_reason=r.get("denial_reason"),
        worker_name=r.get("worker_name"),
        reviewer_name=r.get("reviewer_name"),
    )


class MySQLTimeOffRepository(TimeOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_off_requests(
                    worker_id, request_type, start_date, end_date,
                    paid_hours, unpaid_hours, comments, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(worker_id),
                    request_type.value,
                    start_date,
                    end_date,
                    paid_hours,
                    unpaid_hours,
                    comments,
                    RequestStatus.PENDING.value,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE r.request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_request(row) if row else None

    def list_for_worker(self, worker_id: int) -> Sequence[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE r.worker_id=%s ORDER BY r.created_at DESC, r.request_id DESC",
                (int(worker_id),),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_pending(self) -> Sequence[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE r.status=%s ORDER BY r.created_at ASC, r.request_id ASC",
                (RequestStatus.PENDING.value,),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_all(self, *, limit: int) -> Sequence[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " ORDER BY r.created_at DESC, r.request_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        denial_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_off_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, denial_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    denial_reason,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
