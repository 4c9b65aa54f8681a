from __future__ import annotations

import itertools
from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Worker
from .repository import WorkerRepository


class InMemoryWorkerRepository(WorkerRepository):
    """Demo-mode worker store."""

    def __init__(self):
        self._workers: dict[int, Worker] = {}
        self._ids = itertools.count(1)

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        return self._workers.get(int(worker_id))

    def get_active_by_pin_digest(self, pin_digest: str) -> Optional[Worker]:
        for w in self._workers.values():
            if w.pin_digest == pin_digest and w.is_active:
                return w
        return None

    def pin_digest_exists(self, pin_digest: str) -> bool:
        return any(w.pin_digest == pin_digest for w in self._workers.values())

    def get_by_email(self, email: str) -> Optional[Worker]:
        for w in self._workers.values():
            if w.email and w.email.lower() == email.lower():
                return w
        return None

    def create_worker(
        self,
        *,
        pin_digest: str,
        full_name: str,
        role: Role,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        if self.pin_digest_exists(pin_digest):
            raise ValidationError("This PIN is already in use.")
        worker_id = next(self._ids)
        self._workers[worker_id] = Worker(
            worker_id=worker_id,
            full_name=full_name,
            role=role,
            pin_digest=pin_digest,
            email=email,
            phone=phone,
            created_at=now_local(),
        )
        return worker_id

    def list_all(self) -> Sequence[Worker]:
        return sorted(self._workers.values(), key=lambda w: w.full_name)

    def _patch(self, worker_id: int, **changes) -> bool:
        worker = self._workers.get(int(worker_id))
        if not worker:
            return False
        self._workers[worker.worker_id] = replace(worker, **changes)
        return True

    def set_active(self, worker_id: int, *, is_active: bool) -> bool:
        return self._patch(worker_id, is_active=bool(is_active))

    def update_email(self, worker_id: int, email: str) -> bool:
        return self._patch(worker_id, email=email)

    def update_phone(self, worker_id: int, phone: Optional[str]) -> bool:
        return self._patch(worker_id, phone=phone)

    def update_notification_preference(self, worker_id: int, *, enabled: bool) -> bool:
        return self._patch(worker_id, email_notifications_enabled=bool(enabled))
