from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from rome_timeclock.core.exceptions import AuthenticationError, ValidationError
from rome_timeclock.notifications.email import EmailDeliveryError
from rome_timeclock.verification.memory_verification_repository import InMemoryVerificationCodeRepository
from rome_timeclock.verification.service import VerificationService

from conftest import FakeClock, RecordingEmail

T0 = datetime(2026, 3, 4, 9, 0, 0)


def _service():
    clock = FakeClock(T0)
    codes = InMemoryVerificationCodeRepository()
    email = RecordingEmail()
    return VerificationService(codes, email, clock=clock), codes, email, clock


def _send(svc) -> datetime:
    return svc.send_code(worker_id=1, email="john.smith@example.com", worker_name="John Smith")


def test_send_code_emails_six_digits_valid_for_ten_minutes():
    svc, codes, email, _ = _service()

    expires_at = _send(svc)

    assert expires_at == T0 + timedelta(minutes=10)
    sent = email.codes[0]
    assert sent["to"] == "john.smith@example.com"
    assert len(sent["code"]) == 6 and sent["code"].isdigit()
    assert codes.latest_for_worker(1).code == sent["code"]


def test_code_accepted_at_exactly_expires_at():
    svc, codes, _, clock = _service()
    expires_at = _send(svc)
    code = codes.latest_for_worker(1).code

    clock.now = expires_at
    svc.verify_code(worker_id=1, code=code)

    assert codes.latest_for_worker(1).used_at == expires_at


def test_code_rejected_one_microsecond_after_expiry():
    svc, codes, _, clock = _service()
    expires_at = _send(svc)
    code = codes.latest_for_worker(1).code

    clock.now = expires_at + timedelta(microseconds=1)
    with pytest.raises(AuthenticationError, match="Code expired"):
        svc.verify_code(worker_id=1, code=code)


def test_code_cannot_be_reused():
    svc, codes, _, _ = _service()
    _send(svc)
    code = codes.latest_for_worker(1).code

    svc.verify_code(worker_id=1, code=code)
    with pytest.raises(AuthenticationError, match="Invalid code"):
        svc.verify_code(worker_id=1, code=code)


def test_wrong_code_is_invalid():
    svc, codes, _, _ = _service()
    _send(svc)
    code = codes.latest_for_worker(1).code
    wrong = "100000" if code != "100000" else "100001"

    with pytest.raises(AuthenticationError, match="Invalid code"):
        svc.verify_code(worker_id=1, code=wrong)


def test_code_for_other_worker_is_invalid():
    svc, codes, _, _ = _service()
    _send(svc)
    code = codes.latest_for_worker(1).code

    with pytest.raises(AuthenticationError):
        svc.verify_code(worker_id=2, code=code)


def test_resend_refused_inside_cooldown():
    svc, _, email, clock = _service()
    _send(svc)

    clock.advance(seconds=30)
    with pytest.raises(ValidationError, match="30 seconds"):
        _send(svc)

    clock.advance(seconds=30)
    _send(svc)
    assert len(email.codes) == 2


def test_malformed_code_is_invalid():
    svc, _, _, _ = _service()

    with pytest.raises(AuthenticationError):
        svc.verify_code(worker_id=1, code="12ab")


def test_failed_delivery_stores_nothing_and_allows_immediate_retry():
    clock = FakeClock(T0)
    codes = InMemoryVerificationCodeRepository()
    failing = VerificationService(
        codes, RecordingEmail(fail_with=EmailDeliveryError("Failed to send verification email")), clock=clock
    )

    with pytest.raises(EmailDeliveryError):
        failing.send_code(worker_id=1, email="john.smith@example.com", worker_name="John Smith")

    assert codes.latest_for_worker(1) is None
    assert failing.seconds_until_resend(1) == 0

    email = RecordingEmail()
    VerificationService(codes, email, clock=clock).send_code(
        worker_id=1, email="john.smith@example.com", worker_name="John Smith"
    )
    assert len(email.codes) == 1
    assert codes.latest_for_worker(1).code == email.codes[0]["code"]


def test_code_sent_as_json_number_is_accepted():
    svc, codes, _, _ = _service()
    codes.create(worker_id=1, code="482913", expires_at=T0 + timedelta(minutes=10), created_at=T0)

    svc.verify_code(worker_id=1, code=482913)

    assert codes.latest_for_worker(1).used_at == T0


@pytest.mark.parametrize("code", [None, ["482913"], {"code": "482913"}, True])
def test_non_text_code_is_invalid(code):
    svc, _, _, _ = _service()

    with pytest.raises(AuthenticationError, match="Invalid code"):
        svc.verify_code(worker_id=1, code=code)
