from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import VerificationCode
from .repository import VerificationCodeRepository

_COLUMNS = "code_id, worker_id, code, expires_at, used_at, created_at"


def _to_code(row: dict) -> VerificationCode:
    return VerificationCode(
        code_id=int(row["code_id"]),
        worker_id=int(row["worker_id"]),
        code=row["code"],
        expires_at=row["expires_at"],
        created_at=row["created_at"],
        used_at=row.get("used_at"),
    )


class MySQLVerificationCodeRepository(VerificationCodeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, worker_id: int, code: str, expires_at: datetime, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO verification_codes(worker_id, code, expires_at, created_at)
                VALUES(%s,%s,%s,%s)
                """,
                (int(worker_id), code, expires_at, created_at),
            )
            return int(cur.lastrowid)

    def latest_for_worker(self, worker_id: int) -> Optional[VerificationCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM verification_codes
                WHERE worker_id=%s
                ORDER BY created_at DESC, code_id DESC
                LIMIT 1
                """,
                (int(worker_id),),
            )
            row = fetchone(cur)
            return _to_code(row) if row else None

    def find_unused(self, worker_id: int, code: str) -> Optional[VerificationCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM verification_codes
                WHERE worker_id=%s AND code=%s AND used_at IS NULL
                ORDER BY created_at DESC, code_id DESC
                LIMIT 1
                """,
                (int(worker_id), code),
            )
            row = fetchone(cur)
            return _to_code(row) if row else None

    def mark_used(self, code_id: int, *, used_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # used_at IS NULL keeps a code from being consumed twice.
            cur.execute(
                "UPDATE verification_codes SET used_at=%s WHERE code_id=%s AND used_at IS NULL",
                (used_at, int(code_id)),
            )
            return cur.rowcount > 0
