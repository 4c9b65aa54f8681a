from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import PASSKEY_CHALLENGE_TTL_MINUTES


class ChallengeStore:
    """Pending WebAuthn challenges keyed by worker id.

    One outstanding challenge per worker: issuing a new one replaces the old.
    Reading a challenge consumes it. Lives in process memory, so a
    multi-process deployment needs sticky sessions.
    """

    def __init__(
        self,
        *,
        ttl: timedelta = timedelta(minutes=PASSKEY_CHALLENGE_TTL_MINUTES),
        clock: Callable[[], datetime] = now_local,
    ):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[int, tuple[bytes, datetime]] = {}
        self._lock = threading.Lock()

    def put(self, worker_id: int, challenge: bytes) -> None:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            self._entries[int(worker_id)] = (challenge, now + self._ttl)

    def pop(self, worker_id: int) -> Optional[bytes]:
        now = self._clock()
        with self._lock:
            entry = self._entries.pop(int(worker_id), None)
        if not entry:
            return None
        challenge, expires_at = entry
        if expires_at < now:
            return None
        return challenge

    def _purge_expired(self, now: datetime) -> None:
        for worker_id in [k for k, (_, exp) in self._entries.items() if exp < now]:
            del self._entries[worker_id]

    def __len__(self) -> int:
        return len(self._entries)
