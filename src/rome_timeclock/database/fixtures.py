"""Demo workers used by demo mode and the dev seed script."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class DemoWorker:
    pin: str
    full_name: str
    role: Role
    email: Optional[str]
    phone: Optional[str]


DEMO_WORKERS: tuple[DemoWorker, ...] = (
    DemoWorker("123456", "John Smith", Role.WORKER, "john.smith@example.com", "(555) 123-4567"),
    DemoWorker("234567", "Maria Garcia", Role.WORKER, "maria.garcia@example.com", "(555) 234-5678"),
    DemoWorker("345678", "James Wilson", Role.SUPERVISOR, "james.wilson@example.com", "(555) 345-6789"),
    DemoWorker("456789", "Sarah Johnson", Role.WORKER, "sarah.johnson@example.com", None),
    DemoWorker("567890", "Michael Brown", Role.MANAGER, "michael.brown@example.com", "(555) 567-8901"),
)
