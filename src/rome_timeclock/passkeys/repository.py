from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PasskeyCredential

DUPLICATE_PASSKEY = "This passkey is already registered"


class PasskeyRepository(Protocol):
    def list_for_worker(self, worker_id: int) -> Sequence[PasskeyCredential]:
        """Newest first."""

        raise NotImplementedError

    def get_for_worker(self, worker_id: int, credential_id: str) -> Optional[PasskeyCredential]:
        raise NotImplementedError

    def create(
        self,
        *,
        worker_id: int,
        credential_id: str,
        public_key: str,
        counter: int,
        device_name: Optional[str],
        transports: Sequence[str],
    ) -> int:
        """Raises ValidationError when the credential id is stored for any worker."""

        raise NotImplementedError

    def record_use(self, passkey_id: int, *, counter: int, used_at: datetime) -> bool:
        raise NotImplementedError

    def delete(self, worker_id: int, credential_id: str) -> bool:
        raise NotImplementedError
