from __future__ import annotations

import pytest

from rome_timeclock.common.security import pin_digest
from rome_timeclock.core.enums import Role
from rome_timeclock.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from rome_timeclock.passkeys.memory_passkey_repository import InMemoryPasskeyRepository
from rome_timeclock.workers.memory_worker_repository import InMemoryWorkerRepository
from rome_timeclock.workers.service import AuthService, WorkerService

PEPPER = "test-pepper"


@pytest.fixture
def workers():
    repo = InMemoryWorkerRepository()
    repo.create_worker(
        pin_digest=pin_digest("123456", pepper=PEPPER),
        full_name="John Smith",
        role=Role.WORKER,
        email="john.smith@example.com",
    )
    repo.create_worker(
        pin_digest=pin_digest("222222", pepper=PEPPER),
        full_name="No Email",
        role=Role.WORKER,
    )
    return repo


@pytest.fixture
def passkeys():
    return InMemoryPasskeyRepository()


@pytest.fixture
def auth(workers, passkeys):
    return AuthService(workers, passkeys, pin_pepper=PEPPER, kiosk_admin_pin="000000")


def test_kiosk_login_with_valid_pin(auth):
    result = auth.authenticate_kiosk("123456")

    assert result.is_admin is False
    assert result.worker.full_name == "John Smith"


@pytest.mark.parametrize("pin", ["", "12345", "1234567", "abcdef", "999999"])
def test_kiosk_login_rejects_bad_pins(auth, pin):
    with pytest.raises(AuthenticationError, match="Invalid PIN"):
        auth.authenticate_kiosk(pin)


def test_kiosk_login_accepts_pin_sent_as_number(auth):
    result = auth.authenticate_kiosk(123456)

    assert result.worker.full_name == "John Smith"


@pytest.mark.parametrize("pin", [None, True, ["123456"], 12345.6])
def test_kiosk_login_rejects_non_text_pins(auth, pin):
    with pytest.raises(AuthenticationError, match="Invalid PIN"):
        auth.authenticate_kiosk(pin)


def test_kiosk_admin_pin(auth):
    result = auth.authenticate_kiosk("000000")

    assert result.is_admin is True
    assert result.worker is None


def test_admin_pin_disabled_when_not_configured(workers, passkeys):
    auth = AuthService(workers, passkeys, pin_pepper=PEPPER, kiosk_admin_pin=None)

    with pytest.raises(AuthenticationError):
        auth.authenticate_kiosk("000000")


def test_admin_pin_is_not_a_worker(auth):
    with pytest.raises(AuthenticationError):
        auth.authenticate_worker("000000")


def test_inactive_worker_cannot_log_in(auth, workers):
    workers.set_active(1, is_active=False)

    with pytest.raises(AuthenticationError):
        auth.authenticate_kiosk("123456")


def test_dashboard_requires_email(auth):
    with pytest.raises(AuthenticationError, match="No email registered"):
        auth.authenticate_dashboard("222222")


def test_dashboard_reports_passkeys(auth, passkeys):
    assert auth.authenticate_dashboard("123456").has_passkeys is False

    passkeys.create(
        worker_id=1,
        credential_id="abc",
        public_key="pk",
        counter=0,
        device_name="Laptop",
        transports=["internal"],
    )
    assert auth.authenticate_dashboard("123456").has_passkeys is True


def test_create_worker_stores_digest_not_pin(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    worker = svc.create_worker(current_role=Role.MANAGER, pin="654321", full_name="  New Hire ")

    assert worker.full_name == "New Hire"
    assert worker.role == Role.WORKER
    assert worker.pin_digest != "654321"
    assert worker.pin_digest == pin_digest("654321", pepper=PEPPER)


def test_create_worker_rejects_duplicate_pin(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(ValidationError, match="This PIN is already in use."):
        svc.create_worker(current_role=Role.MANAGER, pin="123456", full_name="Copycat")


def test_create_worker_rejects_kiosk_admin_pin(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER, kiosk_admin_pin="000000")

    with pytest.raises(ValidationError, match="This PIN is already in use."):
        svc.create_worker(current_role=Role.MANAGER, pin="000000", full_name="Shadow Admin")


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"pin": "12", "full_name": "A"}, "PIN must be exactly 6 digits."),
        ({"pin": "333333", "full_name": "  "}, "Name is required."),
        ({"pin": "333333", "full_name": "A", "role": "owner"}, "Unknown role."),
        ({"pin": "333333", "full_name": "A", "role": "admin"}, "Unknown role."),
        ({"pin": "333333", "full_name": 42}, "Name must be text."),
        ({"pin": True, "full_name": "A"}, "PIN must be text."),
        ({"pin": "333333", "full_name": "A", "email": ["a@b.co"]}, "Email must be text."),
    ],
)
def test_create_worker_validation(workers, kwargs, message):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(ValidationError, match=message):
        svc.create_worker(current_role=Role.MANAGER, **kwargs)


def test_worker_role_cannot_create_workers(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(AuthorizationError):
        svc.create_worker(current_role=Role.WORKER, pin="333333", full_name="A")


def test_kiosk_admin_can_create_workers(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    worker = svc.create_worker(current_role=Role.ADMIN, pin="333333", full_name="A", role="supervisor")

    assert worker.role == Role.SUPERVISOR


def test_list_workers_sorted_by_name(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    names = [w["full_name"] for w in svc.list_workers()]

    assert names == ["John Smith", "No Email"]


def test_update_email_checks_format_and_uniqueness(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(ValidationError, match="Invalid email format"):
        svc.update_email(2, "not-an-email")
    with pytest.raises(ValidationError, match="This email is already in use"):
        svc.update_email(2, "JOHN.SMITH@example.com")

    svc.update_email(2, "New.Person@Example.com")
    assert svc.get_profile(2)["email"] == "new.person@example.com"


def test_update_phone_rules(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(ValidationError, match="Invalid phone number"):
        svc.update_phone(1, "555-123")

    svc.update_phone(1, "(555) 123-4567")
    assert svc.get_profile(1)["phone"] == "(555) 123-4567"

    svc.update_phone(1, "")
    assert svc.get_profile(1)["phone"] is None


def test_notification_preference(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    svc.update_notification_preference(1, False)

    assert svc.get_profile(1)["email_notifications_enabled"] is False


def test_set_active_requires_manager(workers):
    svc = WorkerService(workers, pin_pepper=PEPPER)

    with pytest.raises(AuthorizationError):
        svc.set_active(current_role=Role.WORKER, worker_id=1, is_active=False)

    svc.set_active(current_role=Role.SUPERVISOR, worker_id=1, is_active=False)
    assert svc.get_profile(1)["is_active"] is False
