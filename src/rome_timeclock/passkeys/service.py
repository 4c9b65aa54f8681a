from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from webauthn import (
    generate_authentication_options,
    generate_registration_options,
    options_to_json,
    verify_authentication_response,
    verify_registration_response,
)
from webauthn.helpers import base64url_to_bytes, bytes_to_base64url
from webauthn.helpers.exceptions import WebAuthnException
from webauthn.helpers.structs import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    AuthenticatorSelectionCriteria,
    AuthenticatorTransport,
    PublicKeyCredentialDescriptor,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from ..common.datetime_utils import now_local
from ..common.logger import get_logger
from ..common.validators import optional_text
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..workers.model import Worker
from .challenge_store import ChallengeStore
from .model import PasskeyCredential
from .repository import PasskeyRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class RelyingParty:
    rp_id: str
    rp_name: str
    origin: str


def _descriptors(credentials) -> list[PublicKeyCredentialDescriptor]:
    out = []
    for c in credentials:
        transports = []
        for t in c.transports:
            try:
                transports.append(AuthenticatorTransport(t))
            except ValueError:
                continue
        out.append(PublicKeyCredentialDescriptor(id=base64url_to_bytes(c.credential_id), transports=transports or None))
    return out


class PasskeyService:
    """Relays WebAuthn ceremonies to the `webauthn` library.

    All signature and attestation checks happen inside the library; this
    class only tracks challenges and persists the resulting credentials.
    """

    def __init__(
        self,
        passkeys: PasskeyRepository,
        challenges: ChallengeStore,
        relying_party: RelyingParty,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._passkeys = passkeys
        self._challenges = challenges
        self._rp = relying_party
        self._clock = clock

    def list_passkeys(self, worker_id: int) -> list[dict]:
        # Public keys stay server-side.
        return [
            {
                "id": p.passkey_id,
                "credential_id": p.credential_id,
                "device_name": p.device_name,
                "last_used_at": p.last_used_at.isoformat() if p.last_used_at else None,
                "created_at": p.created_at.isoformat() if p.created_at else None,
            }
            for p in self._passkeys.list_for_worker(int(worker_id))
        ]

    def registration_options(self, worker: Worker) -> dict:
        existing = self._passkeys.list_for_worker(worker.worker_id)
        options = generate_registration_options(
            rp_id=self._rp.rp_id,
            rp_name=self._rp.rp_name,
            user_id=str(worker.worker_id).encode("utf-8"),
            user_name=worker.email or worker.full_name,
            user_display_name=worker.full_name,
            attestation=AttestationConveyancePreference.NONE,
            exclude_credentials=_descriptors(existing),
            authenticator_selection=AuthenticatorSelectionCriteria(
                authenticator_attachment=AuthenticatorAttachment.PLATFORM,
                resident_key=ResidentKeyRequirement.PREFERRED,
                user_verification=UserVerificationRequirement.PREFERRED,
            ),
        )
        self._challenges.put(worker.worker_id, options.challenge)
        return json.loads(options_to_json(options))

    def verify_registration(self, worker_id: int, response: dict, device_name: Optional[str] = None) -> PasskeyCredential:
        expected_challenge = self._challenges.pop(worker_id)
        if not expected_challenge:
            raise ValidationError("Challenge expired or not found")

        try:
            verification = verify_registration_response(
                credential=response,
                expected_challenge=expected_challenge,
                expected_origin=self._rp.origin,
                expected_rp_id=self._rp.rp_id,
            )
        except WebAuthnException as exc:
            logger.warning("Passkey registration failed for worker %s: %s", worker_id, exc)
            raise ValidationError("Verification failed")

        device_type = getattr(verification.credential_device_type, "value", verification.credential_device_type)
        default_name = f"{device_type}{' (synced)' if verification.credential_backed_up else ''}"
        transports = (response.get("response") or {}).get("transports") or []
        credential_id = bytes_to_base64url(verification.credential_id)

        passkey_id = self._passkeys.create(
            worker_id=int(worker_id),
            credential_id=credential_id,
            public_key=bytes_to_base64url(verification.credential_public_key),
            counter=int(verification.sign_count),
            device_name=optional_text(device_name, "Device name") or default_name,
            transports=[str(t) for t in transports],
        )
        logger.info("Passkey %s registered for worker %s", passkey_id, worker_id)
        return self._passkeys.get_for_worker(int(worker_id), credential_id)

    def authentication_options(self, worker_id: int) -> dict:
        existing = self._passkeys.list_for_worker(int(worker_id))
        if not existing:
            raise ValidationError("No passkeys registered")

        options = generate_authentication_options(
            rp_id=self._rp.rp_id,
            allow_credentials=_descriptors(existing),
            user_verification=UserVerificationRequirement.PREFERRED,
        )
        self._challenges.put(int(worker_id), options.challenge)
        return json.loads(options_to_json(options))

    def verify_authentication(self, worker_id: int, response: dict) -> PasskeyCredential:
        expected_challenge = self._challenges.pop(worker_id)
        if not expected_challenge:
            raise AuthenticationError("Challenge expired or not found")

        credential = self._passkeys.get_for_worker(int(worker_id), str(response.get("id") or ""))
        if not credential:
            raise AuthenticationError("Credential not found")

        try:
            verification = verify_authentication_response(
                credential=response,
                expected_challenge=expected_challenge,
                expected_origin=self._rp.origin,
                expected_rp_id=self._rp.rp_id,
                credential_public_key=base64url_to_bytes(credential.public_key),
                credential_current_sign_count=credential.counter,
            )
        except WebAuthnException as exc:
            logger.warning("Passkey authentication failed for worker %s: %s", worker_id, exc)
            raise AuthenticationError("Verification failed")

        self._passkeys.record_use(
            credential.passkey_id,
            counter=int(verification.new_sign_count),
            used_at=self._clock(),
        )
        return credential

    def delete(self, worker_id: int, credential_id: str) -> None:
        if not credential_id:
            raise ValidationError("Missing required fields")
        if not self._passkeys.delete(int(worker_id), credential_id):
            raise NotFoundError("Passkey not found")
