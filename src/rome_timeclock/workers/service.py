from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.logger import get_logger
from ..common.security import pin_digest, pins_match
from ..common.validators import normalize_phone, require_email, require_non_empty, require_pin
from ..core.enums import MANAGER_ROLES, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..passkeys.repository import PasskeyRepository
from .model import Worker
from .repository import WorkerRepository

logger = get_logger(__name__)

INVALID_PIN = "Invalid PIN. Please try again."


@dataclass(frozen=True)
class KioskLogin:
    """Result of a kiosk PIN entry. `worker` is None for the admin PIN."""

    worker: Optional[Worker]
    is_admin: bool = False


@dataclass(frozen=True)
class DashboardLogin:
    worker: Worker
    has_passkeys: bool


class AuthService:
    """Use case: first-factor PIN authentication for kiosk and dashboard."""

    def __init__(
        self,
        workers: WorkerRepository,
        passkeys: PasskeyRepository,
        *,
        pin_pepper: str,
        kiosk_admin_pin: Optional[str] = None,
    ):
        self._workers = workers
        self._passkeys = passkeys
        self._pepper = pin_pepper
        self._kiosk_admin_pin = kiosk_admin_pin or None

    def _find_active(self, pin: str) -> Worker:
        try:
            pin = require_pin(pin)
        except ValidationError:
            raise AuthenticationError(INVALID_PIN)

        worker = self._workers.get_active_by_pin_digest(pin_digest(pin, pepper=self._pepper))
        if not worker:
            logger.info("Rejected PIN attempt")
            raise AuthenticationError(INVALID_PIN)
        return worker

    def is_kiosk_admin_pin(self, pin: str) -> bool:
        if not self._kiosk_admin_pin:
            return False
        try:
            pin = require_pin(pin)
        except ValidationError:
            return False
        return pins_match(
            pin,
            pin_digest(self._kiosk_admin_pin, pepper=self._pepper),
            pepper=self._pepper,
        )

    def authenticate_kiosk(self, pin: str) -> KioskLogin:
        if self.is_kiosk_admin_pin(pin):
            logger.info("Kiosk admin PIN accepted")
            return KioskLogin(worker=None, is_admin=True)
        return KioskLogin(worker=self._find_active(pin))

    def authenticate_worker(self, pin: str) -> Worker:
        """PIN check for kiosk actions; the admin PIN is not a worker."""
        return self._find_active(pin)

    def authenticate_dashboard(self, pin: str) -> DashboardLogin:
        worker = self._find_active(pin)
        if not worker.email:
            raise AuthenticationError("No email registered. Please contact your manager.")

        has_passkeys = len(self._passkeys.list_for_worker(worker.worker_id)) > 0
        return DashboardLogin(worker=worker, has_passkeys=has_passkeys)

    def get_active_worker(self, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(int(worker_id))
        if not worker or not worker.is_active:
            raise AuthenticationError("Worker is not active")
        return worker


class WorkerService:
    """Use case: manage workers (managers, kiosk admin) and self-service profile."""

    def __init__(self, workers: WorkerRepository, *, pin_pepper: str, kiosk_admin_pin: Optional[str] = None):
        self._workers = workers
        self._pepper = pin_pepper
        self._kiosk_admin_pin = kiosk_admin_pin or None

    def create_worker(
        self,
        *,
        current_role: Role,
        pin: str,
        full_name: str,
        role: str | Role = Role.WORKER,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Worker:
        if current_role not in MANAGER_ROLES and current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to add workers.")

        pin = require_pin(pin)
        full_name = require_non_empty(full_name, "Name")
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Unknown role.")
        if role == Role.ADMIN:
            raise ValidationError("Unknown role.")

        email = require_email(email) if email else None
        phone = normalize_phone(phone)

        digest = pin_digest(pin, pepper=self._pepper)
        # The kiosk resolves the admin PIN before any worker lookup.
        if pin == self._kiosk_admin_pin or self._workers.pin_digest_exists(digest):
            raise ValidationError("This PIN is already in use.")
        if email and self._workers.get_by_email(email):
            raise ValidationError("This email is already in use")

        worker_id = self._workers.create_worker(
            pin_digest=digest,
            full_name=full_name,
            role=role,
            email=email,
            phone=phone,
        )
        logger.info("Worker %s created (role=%s)", worker_id, role.value)
        return self._require(worker_id)

    def list_workers(self) -> list[dict]:
        return [self.to_view(w) for w in self._workers.list_all()]

    def set_active(self, *, current_role: Role, worker_id: int, is_active: bool) -> None:
        if current_role not in MANAGER_ROLES:
            raise AuthorizationError("You do not have permission to change workers.")

        self._require(worker_id)
        if not self._workers.set_active(int(worker_id), is_active=is_active):
            raise ValidationError("Failed to update worker")

    def get_profile(self, worker_id: int) -> dict:
        worker = self._require(worker_id)
        view = self.to_view(worker)
        view["email_notifications_enabled"] = worker.email_notifications_enabled
        return view

    def update_email(self, worker_id: int, new_email: str) -> None:
        email = require_email(new_email)
        self._require(worker_id)

        other = self._workers.get_by_email(email)
        if other and other.worker_id != int(worker_id):
            raise ValidationError("This email is already in use")

        if not self._workers.update_email(int(worker_id), email):
            raise ValidationError("Failed to update email")

    def update_phone(self, worker_id: int, phone: Optional[str]) -> None:
        cleaned = normalize_phone(phone)
        self._require(worker_id)
        if not self._workers.update_phone(int(worker_id), cleaned):
            raise ValidationError("Failed to update phone")

    def update_notification_preference(self, worker_id: int, enabled: bool) -> None:
        self._require(worker_id)
        if not self._workers.update_notification_preference(int(worker_id), enabled=bool(enabled)):
            raise ValidationError("Failed to update notification preference")

    def _require(self, worker_id: int) -> Worker:
        worker = self._workers.get_by_id(int(worker_id))
        if not worker:
            raise NotFoundError("Worker not found")
        return worker

    @staticmethod
    def to_view(w: Worker) -> dict:
        return {
            "id": w.worker_id,
            "full_name": w.full_name,
            "role": w.role.value,
            "email": w.email,
            "phone": w.phone,
            "is_active": w.is_active,
            "created_at": w.created_at.isoformat() if w.created_at else None,
        }
