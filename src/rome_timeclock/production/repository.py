from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import ProductionEntry


class ProductionRepository(Protocol):
    def add_many(self, *, worker_id: int, entries: Sequence[ProductionEntry], logged_at: datetime) -> list[int]:
        """Insert all entries in one transaction."""

        raise NotImplementedError
