from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Worker
from .repository import WorkerRepository

_COLUMNS = """
    worker_id, pin_digest, full_name, role, email, phone,
    is_active, email_notifications_enabled, created_at
"""


def _to_worker(row: dict) -> Worker:
    return Worker(
        worker_id=int(row["worker_id"]),
        full_name=row["full_name"],
        role=Role(row["role"]),
        pin_digest=row["pin_digest"],
        email=row.get("email"),
        phone=row.get("phone"),
        is_active=bool(row.get("is_active", True)),
        email_notifications_enabled=bool(row.get("email_notifications_enabled", True)),
        created_at=row.get("created_at"),
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE {where}", params)
            row = fetchone(cur)
            return _to_worker(row) if row else None

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        return self._get_one("worker_id=%s", (int(worker_id),))

    def get_active_by_pin_digest(self, pin_digest: str) -> Optional[Worker]:
        return self._get_one("pin_digest=%s AND is_active=1", (pin_digest,))

    def pin_digest_exists(self, pin_digest: str) -> bool:
        return self._get_one("pin_digest=%s", (pin_digest,)) is not None

    def get_by_email(self, email: str) -> Optional[Worker]:
        return self._get_one("email=%s", (email,))

    def create_worker(
        self,
        *,
        pin_digest: str,
        full_name: str,
        role: Role,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO workers(pin_digest, full_name, role, email, phone, is_active)
                    VALUES(%s,%s,%s,%s,%s,1)
                    """,
                    (pin_digest, full_name, role.value, email, phone),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if not is_duplicate_key(exc):
                raise
            if "uq_workers_email" in str(exc):
                raise ValidationError("This email is already in use")
            raise ValidationError("This PIN is already in use.")

    def list_all(self) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers ORDER BY full_name ASC")
            return [_to_worker(r) for r in fetchall(cur)]

    def _update(self, sql: str, params: tuple) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return cur.rowcount > 0

    def set_active(self, worker_id: int, *, is_active: bool) -> bool:
        return self._update(
            "UPDATE workers SET is_active=%s WHERE worker_id=%s",
            (1 if is_active else 0, int(worker_id)),
        )

    def update_email(self, worker_id: int, email: str) -> bool:
        try:
            return self._update("UPDATE workers SET email=%s WHERE worker_id=%s", (email, int(worker_id)))
        except mysql.connector.IntegrityError as exc:
            if is_duplicate_key(exc):
                raise ValidationError("This email is already in use")
            raise

    def update_phone(self, worker_id: int, phone: Optional[str]) -> bool:
        return self._update("UPDATE workers SET phone=%s WHERE worker_id=%s", (phone, int(worker_id)))

    def update_notification_preference(self, worker_id: int, *, enabled: bool) -> bool:
        return self._update(
            "UPDATE workers SET email_notifications_enabled=%s WHERE worker_id=%s",
            (1 if enabled else 0, int(worker_id)),
        )
