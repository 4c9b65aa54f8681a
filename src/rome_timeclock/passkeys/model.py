from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PasskeyCredential:
    """A WebAuthn credential registered by one worker on one device.

    `credential_id` and `public_key` are base64url strings as produced by the
    browser and the verification library.
    """

    passkey_id: int
    worker_id: int
    credential_id: str
    public_key: str
    counter: int
    device_name: Optional[str] = None
    transports: tuple[str, ...] = field(default_factory=tuple)
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
