from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ProductionEntry:
    task_name: str
    quantity: int


@dataclass(frozen=True)
class ProductionLog:
    log_id: int
    worker_id: int
    task_name: str
    quantity: int
    logged_at: datetime
