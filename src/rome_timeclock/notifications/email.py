from __future__ import annotations

from datetime import date
from typing import Optional

import resend
from jinja2 import Environment, PackageLoader, select_autoescape
from resend.exceptions import ResendError

from ..common.logger import get_logger
from ..common.security import mask_email
from ..core.constants import VERIFICATION_CODE_TTL_MINUTES
from ..core.exceptions import DomainError

logger = get_logger(__name__)

DEFAULT_FROM_EMAIL = "ROME <noreply@resend.dev>"

# Resend answers with these while the sending domain is unverified.
_SANDBOX_MARKERS = ("testing emails", "verify a domain")


class EmailDeliveryError(DomainError):
    """Raised when the mail provider rejects a message."""


_templates = Environment(
    loader=PackageLoader("rome_timeclock", "notifications/templates"),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
)


def _render(name: str, **context) -> str:
    context.setdefault("year", date.today().year)
    return _templates.get_template(name).render(**context).strip()


class EmailSender:
    """Sends transactional email through Resend.

    Without an API key nothing is sent and the message is logged instead,
    so demo and development setups can still complete a login.
    """

    def __init__(self, *, api_key: Optional[str] = None, from_email: Optional[str] = None):
        self._api_key = api_key or None
        self._from_email = from_email or DEFAULT_FROM_EMAIL
        if self._api_key:
            resend.api_key = self._api_key
            logger.info("Email service configured (Resend)")
        else:
            logger.info("Email service not configured - messages will be logged")

    @property
    def configured(self) -> bool:
        return self._api_key is not None

    def _send(self, *, to: str, subject: str, html: str, text: Optional[str] = None) -> bool:
        """Returns False when the provider is in sandbox mode and the caller should log instead."""
        params = {
            "from": self._from_email,
            "to": [to],
            "subject": subject,
            "html": html,
        }
        if text:
            params["text"] = text

        try:
            resend.Emails.send(params)
        except ResendError as exc:
            message = getattr(exc, "message", None) or str(exc)
            if any(marker in message for marker in _SANDBOX_MARKERS):
                return False
            logger.error("Resend rejected message to %s: %s", mask_email(to), message)
            raise EmailDeliveryError("Failed to send email")
        return True

    def send_verification_code(self, *, to: str, worker_name: str, code: str) -> None:
        if not self.configured:
            logger.info("[demo] Verification code for %s: %s", mask_email(to), code)
            return

        context = dict(worker_name=worker_name, code=code, ttl_minutes=VERIFICATION_CODE_TTL_MINUTES)
        try:
            sent = self._send(
                to=to,
                subject=f"{code} is your ROME verification code",
                html=_render("verification_code.html", **context),
                text=_render("verification_code.txt", **context),
            )
        except EmailDeliveryError:
            raise EmailDeliveryError("Failed to send verification email")

        if sent:
            logger.info("Verification email sent to %s", mask_email(to))
        else:
            logger.warning("[resend test mode] Cannot send to %s, code: %s", mask_email(to), code)

    def send_time_off_decision(
        self,
        *,
        to: str,
        worker_name: str,
        request_type: str,
        start_date: date,
        end_date: date,
        status: str,
        reviewer_name: Optional[str] = None,
        denial_reason: Optional[str] = None,
    ) -> None:
        if not self.configured:
            logger.info("[demo] Time off %s notification for %s", status, mask_email(to))
            return

        context = dict(
            worker_name=worker_name,
            request_type=request_type,
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
            status=status,
            reviewer_name=reviewer_name,
            denial_reason=denial_reason,
        )
        sent = self._send(
            to=to,
            subject=f"Time Off Request {status.capitalize()} - {request_type}",
            html=_render("time_off_decision.html", **context),
            text=_render("time_off_decision.txt", **context),
        )
        if not sent:
            logger.warning("[resend test mode] Cannot send time off notification to %s", mask_email(to))
