from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import PasskeyCredential
from .repository import DUPLICATE_PASSKEY, PasskeyRepository

_COLUMNS = """
    passkey_id, worker_id, credential_id, public_key, counter,
    device_name, transports, last_used_at, created_at
"""


def _to_credential(r: dict) -> PasskeyCredential:
    transports = tuple(t for t in (r.get("transports") or "").split(",") if t)
    return PasskeyCredential(
        passkey_id=int(r["passkey_id"]),
        worker_id=int(r["worker_id"]),
        credential_id=r["credential_id"],
        public_key=r["public_key"],
        counter=int(r["counter"] or 0),
        device_name=r.get("device_name"),
        transports=transports,
        last_used_at=r.get("last_used_at"),
        created_at=r.get("created_at"),
    )


class MySQLPasskeyRepository(PasskeyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_worker(self, worker_id: int) -> Sequence[PasskeyCredential]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM passkey_credentials
                WHERE worker_id=%s
                ORDER BY created_at DESC, passkey_id DESC
                """,
                (int(worker_id),),
            )
            return [_to_credential(r) for r in fetchall(cur)]

    def get_for_worker(self, worker_id: int, credential_id: str) -> Optional[PasskeyCredential]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM passkey_credentials WHERE worker_id=%s AND credential_id=%s",
                (int(worker_id), credential_id),
            )
            r = fetchone(cur)
            return _to_credential(r) if r else None

    def create(
        self,
        *,
        worker_id: int,
        credential_id: str,
        public_key: str,
        counter: int,
        device_name: Optional[str],
        transports: Sequence[str],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO passkey_credentials(worker_id, credential_id, public_key, counter, device_name, transports)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(worker_id),
                        credential_id,
                        public_key,
                        int(counter),
                        device_name,
                        ",".join(transports) or None,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as exc:
            if not is_duplicate_key(exc):
                raise
            raise ValidationError(DUPLICATE_PASSKEY)

    def record_use(self, passkey_id: int, *, counter: int, used_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE passkey_credentials SET counter=%s, last_used_at=%s WHERE passkey_id=%s",
                (int(counter), used_at, int(passkey_id)),
            )
            return cur.rowcount > 0

    def delete(self, worker_id: int, credential_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM passkey_credentials WHERE worker_id=%s AND credential_id=%s",
                (int(worker_id), credential_id),
            )
            return cur.rowcount > 0
