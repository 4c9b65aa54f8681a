from __future__ import annotations

import hashlib
import hmac
import secrets


def pin_digest(pin: str, *, pepper: str) -> str:
    """Keyed digest of a PIN.

    Deterministic so the workers table can keep a unique index on it and
    lookups stay a single equality match.
    """
    return hmac.new(pepper.encode("utf-8"), pin.encode("utf-8"), hashlib.sha256).hexdigest()


def pins_match(pin: str, digest: str, *, pepper: str) -> bool:
    return hmac.compare_digest(pin_digest(pin, pepper=pepper), digest)


def generate_numeric_code(length: int) -> str:
    # First digit is never 0, matching the 100000-999999 range users expect.
    first = str(secrets.randbelow(9) + 1)
    rest = "".join(str(secrets.randbelow(10)) for _ in range(length - 1))
    return first + rest


def mask_email(email: str) -> str:
    local, _, domain = email.partition("@")
    if not domain or not local:
        return email
    return local[0] + "*" * min(len(local) - 1, 4) + "@" + domain
