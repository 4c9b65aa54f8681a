from __future__ import annotations

import itertools
from datetime import datetime
from typing import Sequence

from .model import ProductionEntry, ProductionLog
from .repository import ProductionRepository


class InMemoryProductionRepository(ProductionRepository):
    def __init__(self):
        self._logs: list[ProductionLog] = []
        self._ids = itertools.count(1)

    def add_many(self, *, worker_id: int, entries: Sequence[ProductionEntry], logged_at: datetime) -> list[int]:
        ids = []
        for e in entries:
            log = ProductionLog(
                log_id=next(self._ids),
                worker_id=int(worker_id),
                task_name=e.task_name,
                quantity=int(e.quantity),
                logged_at=logged_at,
            )
            self._logs.append(log)
            ids.append(log.log_id)
        return ids
