from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from .model import PasskeyCredential
from .repository import DUPLICATE_PASSKEY, PasskeyRepository


class InMemoryPasskeyRepository(PasskeyRepository):
    def __init__(self):
        self._items: dict[int, PasskeyCredential] = {}
        self._ids = itertools.count(1)

    def list_for_worker(self, worker_id: int) -> Sequence[PasskeyCredential]:
        items = [p for p in self._items.values() if p.worker_id == int(worker_id)]
        items.sort(key=lambda p: p.passkey_id, reverse=True)
        return items

    def get_for_worker(self, worker_id: int, credential_id: str) -> Optional[PasskeyCredential]:
        for p in self._items.values():
            if p.worker_id == int(worker_id) and p.credential_id == credential_id:
                return p
        return None

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
        if any(p.credential_id == credential_id for p in self._items.values()):
            raise ValidationError(DUPLICATE_PASSKEY)
        passkey_id = next(self._ids)
        self._items[passkey_id] = PasskeyCredential(
            passkey_id=passkey_id,
            worker_id=int(worker_id),
            credential_id=credential_id,
            public_key=public_key,
            counter=int(counter),
            device_name=device_name,
            transports=tuple(transports),
            created_at=now_local(),
        )
        return passkey_id

    def record_use(self, passkey_id: int, *, counter: int, used_at: datetime) -> bool:
        item = self._items.get(int(passkey_id))
        if not item:
            return False
        self._items[item.passkey_id] = replace(item, counter=int(counter), last_used_at=used_at)
        return True

    def delete(self, worker_id: int, credential_id: str) -> bool:
        item = self.get_for_worker(worker_id, credential_id)
        if not item:
            return False
        del self._items[item.passkey_id]
        return True
