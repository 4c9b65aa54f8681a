"""Flask helpers shared by the controllers: JSON envelopes, session, guards."""

from __future__ import annotations

from datetime import datetime, timedelta
from functools import wraps
from typing import Optional

from flask import current_app, jsonify, request, session

from ..core.constants import DEFAULT_SESSION_DAYS, PENDING_LOGIN_MINUTES
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError
from ..workers.model import Worker
from .logger import get_logger

logger = get_logger(__name__)

_PENDING_KEY = "pending_login"


def _now() -> datetime:
    # Services and sessions share the container clock.
    return current_app.extensions["rome_timeclock"].clock()


def ok(http_status: int = 200, /, **payload):
    return jsonify({"success": True, **payload}), http_status


def fail(message: str, status: int = 400):
    return jsonify({"success": False, "error": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def api_view(view):
    """Translate domain errors raised by services into JSON envelopes."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except AuthorizationError as e:
            return fail(str(e), 403)
        except NotFoundError as e:
            return fail(str(e), 404)
        except DomainError as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return fail("Something went wrong. Please try again.", 500)

    return wrapper


# -------- Session --------
def start_session(worker: Worker, *, days: int = DEFAULT_SESSION_DAYS) -> dict:
    session.clear()
    session.permanent = True
    session["worker_id"] = worker.worker_id
    session["name"] = worker.full_name
    session["email"] = worker.email
    session["role"] = worker.role.value
    session["expires_at"] = (_now() + timedelta(days=days)).isoformat()
    return session_info()


def session_info() -> Optional[dict]:
    if "worker_id" not in session:
        return None
    return {
        "worker_id": session["worker_id"],
        "name": session.get("name"),
        "email": session.get("email"),
        "role": session.get("role"),
        "expires_at": session.get("expires_at"),
    }


def _expired(iso_value: Optional[str]) -> bool:
    if not iso_value:
        return True
    try:
        return _now() > datetime.fromisoformat(iso_value)
    except ValueError:
        return True


def has_valid_session() -> bool:
    if "worker_id" not in session:
        return False
    if _expired(session.get("expires_at")):
        session.clear()
        return False
    return True


def current_worker_id() -> int:
    return int(session["worker_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not has_valid_session():
            return fail("Please log in to continue.", 401)
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not has_valid_session():
                return fail("Please log in to continue.", 401)
            if session.get("role") not in allowed:
                return fail("You do not have permission to do that.", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator


# -------- Pending login (PIN accepted, second factor outstanding) --------
def set_pending_login(worker: Worker, *, minutes: int = PENDING_LOGIN_MINUTES) -> None:
    session[_PENDING_KEY] = {
        "worker_id": worker.worker_id,
        "expires_at": (_now() + timedelta(minutes=minutes)).isoformat(),
    }


def pending_worker_id() -> Optional[int]:
    pending = session.get(_PENDING_KEY)
    if not pending:
        return None
    if _expired(pending.get("expires_at")):
        session.pop(_PENDING_KEY, None)
        return None
    return int(pending["worker_id"])


def pending_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if pending_worker_id() is None:
            return fail("Login expired. Please enter your PIN again.", 401)
        return view(*args, **kwargs)

    return wrapper
