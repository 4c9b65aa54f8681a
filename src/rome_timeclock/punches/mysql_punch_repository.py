from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Punch
from .repository import PunchRepository


def _to_punch(row: dict) -> Punch:
    return Punch(
        punch_id=int(row["punch_id"]),
        worker_id=int(row["worker_id"]),
        punch_type=PunchType(row["punch_type"]),
        punched_at=row["punched_at"],
    )


class MySQLPunchRepository(PunchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, worker_id: int, punch_type: PunchType, punched_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO punches(worker_id, punch_type, punched_at) VALUES(%s,%s,%s)",
                (int(worker_id), punch_type.value, punched_at),
            )
            return int(cur.lastrowid)

    def latest_for_worker(self, worker_id: int) -> Optional[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT punch_id, worker_id, punch_type, punched_at
                FROM punches
                WHERE worker_id=%s
                ORDER BY punched_at DESC, punch_id DESC
                LIMIT 1
                """,
                (int(worker_id),),
            )
            row = fetchone(cur)
            return _to_punch(row) if row else None

    def list_since(self, worker_id: int, since: datetime) -> Sequence[Punch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT punch_id, worker_id, punch_type, punched_at
                FROM punches
                WHERE worker_id=%s AND punched_at >= %s
                ORDER BY punched_at ASC, punch_id ASC
                """,
                (int(worker_id), since),
            )
            return [_to_punch(r) for r in fetchall(cur)]
