from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from typing import Optional

from .model import VerificationCode
from .repository import VerificationCodeRepository


class InMemoryVerificationCodeRepository(VerificationCodeRepository):
    def __init__(self):
        self._codes: dict[int, VerificationCode] = {}
        self._ids = itertools.count(1)

    def create(self, *, worker_id: int, code: str, expires_at: datetime, created_at: datetime) -> int:
        code_id = next(self._ids)
        self._codes[code_id] = VerificationCode(
            code_id=code_id,
            worker_id=int(worker_id),
            code=code,
            expires_at=expires_at,
            created_at=created_at,
        )
        return code_id

    def _newest_first(self, worker_id: int) -> list[VerificationCode]:
        items = [c for c in self._codes.values() if c.worker_id == int(worker_id)]
        items.sort(key=lambda c: (c.created_at, c.code_id), reverse=True)
        return items

    def latest_for_worker(self, worker_id: int) -> Optional[VerificationCode]:
        items = self._newest_first(worker_id)
        return items[0] if items else None

    def find_unused(self, worker_id: int, code: str) -> Optional[VerificationCode]:
        for c in self._newest_first(worker_id):
            if c.code == code and c.used_at is None:
                return c
        return None

    def mark_used(self, code_id: int, *, used_at: datetime) -> bool:
        item = self._codes.get(int(code_id))
        if not item or item.used_at is not None:
            return False
        self._codes[item.code_id] = replace(item, used_at=used_at)
        return True
