from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Worker:
    """Domain entity: a warehouse worker.

    The PIN never leaves the database in clear text; only its keyed digest is
    carried here.
    """

    worker_id: int
    full_name: str
    role: Role
    pin_digest: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    email_notifications_enabled: bool = True
    created_at: Optional[datetime] = None
