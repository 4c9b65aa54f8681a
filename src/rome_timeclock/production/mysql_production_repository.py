from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import ProductionEntry
from .repository import ProductionRepository


class MySQLProductionRepository(ProductionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add_many(self, *, worker_id: int, entries: Sequence[ProductionEntry], logged_at: datetime) -> list[int]:
        ids = []
        with db_cursor(self._conn_factory) as (_, cur):
            for e in entries:
                cur.execute(
                    """
                    INSERT INTO production_logs(worker_id, task_name, quantity, logged_at)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(worker_id), e.task_name, int(e.quantity), logged_at),
                )
                ids.append(int(cur.lastrowid))
        return ids
