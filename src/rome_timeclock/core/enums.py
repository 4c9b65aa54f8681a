from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Worker roles used for route guards."""

    WORKER = "worker"
    SUPERVISOR = "supervisor"
    MANAGER = "manager"
    # Only issued to the kiosk admin PIN, never stored on a worker row.
    ADMIN = "admin"


MANAGER_ROLES = frozenset({Role.MANAGER, Role.SUPERVISOR})


class PunchType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class TimeOffType(str, Enum):
    VACATION = "vacation"
    PERSONAL = "personal"
    SICK = "sick"
    BEREAVEMENT = "bereavement"
    UNPAID = "unpaid"


class RequestStatus(str, Enum):
    """Time-off review states. Only PENDING may transition."""

    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"
