from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import Punch


class PunchRepository(Protocol):
    def append(self, *, worker_id: int, punch_type: PunchType, punched_at: datetime) -> int:
        raise NotImplementedError

    def latest_for_worker(self, worker_id: int) -> Optional[Punch]:
        raise NotImplementedError

    def list_since(self, worker_id: int, since: datetime) -> Sequence[Punch]:
        """Punches at or after `since`, oldest first."""

        raise NotImplementedError
