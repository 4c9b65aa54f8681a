from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Worker


class WorkerRepository(Protocol):
    """Repository interface for workers.

    Services depend on this protocol; MySQL and in-memory (demo mode)
    implementations are swapped in by the container.
    """

    def get_by_id(self, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def get_active_by_pin_digest(self, pin_digest: str) -> Optional[Worker]:
        raise NotImplementedError

    def pin_digest_exists(self, pin_digest: str) -> bool:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Worker]:
        raise NotImplementedError

    def create_worker(
        self,
        *,
        pin_digest: str,
        full_name: str,
        role: Role,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[Worker]:
        """All workers ordered by full name."""

        raise NotImplementedError

    def set_active(self, worker_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def update_email(self, worker_id: int, email: str) -> bool:
        raise NotImplementedError

    def update_phone(self, worker_id: int, phone: Optional[str]) -> bool:
        raise NotImplementedError

    def update_notification_preference(self, worker_id: int, *, enabled: bool) -> bool:
        raise NotImplementedError
