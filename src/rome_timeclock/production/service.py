from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable

from ..common.datetime_utils import now_local
from ..common.logger import get_logger
from ..core.exceptions import ValidationError
from .model import ProductionEntry, ProductionLog
from .repository import ProductionRepository

logger = get_logger(__name__)


def _parse_entry(raw) -> ProductionEntry | None:
    """Accepts {task_name, quantity} (or the camelCase taskName). Bad rows are skipped."""
    if not isinstance(raw, dict):
        return None
    task_name = str(raw.get("task_name") or raw.get("taskName") or "").strip()
    try:
        quantity = int(raw.get("quantity") or 0)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Quantity must be a whole number.")
    if not task_name or quantity <= 0:
        return None
    return ProductionEntry(task_name=task_name, quantity=quantity)


class ProductionService:
    def __init__(self, logs: ProductionRepository, *, clock: Callable[[], datetime] = now_local):
        self._logs = logs
        self._clock = clock

    def log_production(self, worker_id: int, entries: Iterable) -> list[ProductionLog]:
        if entries is not None and not isinstance(entries, (list, tuple)):
            raise ValidationError("No tasks to log. Please add quantities.")
        valid = [e for e in (_parse_entry(raw) for raw in (entries or [])) if e]
        if not valid:
            raise ValidationError("No tasks to log. Please add quantities.")

        now = self._clock()
        ids = self._logs.add_many(worker_id=int(worker_id), entries=valid, logged_at=now)
        logger.info("Worker %s logged %d production entries", worker_id, len(ids))
        return [
            ProductionLog(log_id=log_id, worker_id=int(worker_id), task_name=e.task_name, quantity=e.quantity, logged_at=now)
            for log_id, e in zip(ids, valid)
        ]

    @staticmethod
    def to_view(log: ProductionLog) -> dict:
        return {
            "id": log.log_id,
            "worker_id": log.worker_id,
            "task_name": log.task_name,
            "quantity": log.quantity,
            "timestamp": log.logged_at.isoformat(),
        }
