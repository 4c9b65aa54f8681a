from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class VerificationCode:
    code_id: int
    worker_id: int
    code: str
    expires_at: datetime
    created_at: datetime
    used_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        # Valid through expires_at inclusive.
        return now > self.expires_at
