from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import VerificationCode


class VerificationCodeRepository(Protocol):
    def create(self, *, worker_id: int, code: str, expires_at: datetime, created_at: datetime) -> int:
        raise NotImplementedError

    def latest_for_worker(self, worker_id: int) -> Optional[VerificationCode]:
        """Most recently created code, used or not."""

        raise NotImplementedError

    def find_unused(self, worker_id: int, code: str) -> Optional[VerificationCode]:
        """Latest unused row matching `code`, expired or not."""

        raise NotImplementedError

    def mark_used(self, code_id: int, *, used_at: datetime) -> bool:
        raise NotImplementedError
