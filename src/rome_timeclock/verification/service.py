from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from ..common.datetime_utils import now_local
from ..common.logger import get_logger
from ..common.security import generate_numeric_code
from ..common.validators import as_text
from ..core.constants import (
    CODE_LENGTH,
    VERIFICATION_CODE_TTL_MINUTES,
    VERIFICATION_RESEND_COOLDOWN_SECONDS,
)
from ..core.exceptions import AuthenticationError, ValidationError
from ..notifications.email import EmailSender
from .repository import VerificationCodeRepository

logger = get_logger(__name__)


class VerificationService:
    """Use case: emailed one-time login codes (second factor)."""

    def __init__(
        self,
        codes: VerificationCodeRepository,
        email: EmailSender,
        *,
        clock: Callable[[], datetime] = now_local,
        ttl: timedelta = timedelta(minutes=VERIFICATION_CODE_TTL_MINUTES),
        cooldown: timedelta = timedelta(seconds=VERIFICATION_RESEND_COOLDOWN_SECONDS),
    ):
        self._codes = codes
        self._email = email
        self._clock = clock
        self._ttl = ttl
        self._cooldown = cooldown

    def seconds_until_resend(self, worker_id: int) -> int:
        latest = self._codes.latest_for_worker(int(worker_id))
        if not latest:
            return 0
        remaining = (latest.created_at + self._cooldown) - self._clock()
        return max(0, int(remaining.total_seconds() + 0.999))

    def send_code(self, *, worker_id: int, email: str, worker_name: str) -> datetime:
        """Email a fresh code, then store it. Returns its expiry."""
        wait = self.seconds_until_resend(worker_id)
        if wait > 0:
            raise ValidationError(f"Please wait {wait} seconds before requesting a new code.")

        now = self._clock()
        code = generate_numeric_code(CODE_LENGTH)
        expires_at = now + self._ttl
        # Store only after a successful send.
        self._email.send_verification_code(to=email, worker_name=worker_name, code=code)
        self._codes.create(worker_id=int(worker_id), code=code, expires_at=expires_at, created_at=now)
        return expires_at

    def verify_code(self, *, worker_id: int, code: str) -> None:
        try:
            code = as_text(code, "Code", allow_number=True).strip()
        except ValidationError:
            raise AuthenticationError("Invalid code. Please try again.")
        if len(code) != CODE_LENGTH or not code.isdigit():
            raise AuthenticationError("Invalid code. Please try again.")

        row = self._codes.find_unused(int(worker_id), code)
        if not row:
            raise AuthenticationError("Invalid code. Please try again.")

        now = self._clock()
        if row.is_expired(now):
            raise AuthenticationError("Code expired. Please request a new one.")

        if not self._codes.mark_used(row.code_id, used_at=now):
            # Lost a race with another request using the same code.
            raise AuthenticationError("Invalid code. Please try again.")
        logger.info("Verification code accepted for worker %s", worker_id)
