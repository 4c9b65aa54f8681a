from __future__ import annotations

import importlib
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .common.datetime_utils import now_local
from .common.logger import get_logger, setup_logging
from .common.web import fail
from .container import build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .database.bootstrap import apply_schema, ensure_demo_workers, list_tables
from .passkeys.controller import register as register_passkeys
from .passkeys.service import RelyingParty
from .production.controller import register as register_production
from .punches.controller import register as register_punches
from .timeoff.controller import register as register_timeoff
from .workers.controller import register as register_workers

logger = get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(settings_module: Optional[str] = None, *, clock: Callable[[], datetime] = now_local) -> Flask:
    load_dotenv(override=False)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    session_days = int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS))
    app.config["SESSION_DAYS"] = session_days
    app.permanent_session_lifetime = timedelta(days=session_days)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SESSION_COOKIE_SECURE"] = bool(getattr(settings, "SESSION_COOKIE_SECURE", False))

    db_config = getattr(settings, "DB_CONFIG", None)
    pin_pepper = getattr(settings, "PIN_PEPPER")
    if db_config:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_workers(db_config, pepper=pin_pepper)
    else:
        logger.info("settings=%s db=<none>", settings_module)

    container = build_container(
        db_config=db_config,
        pin_pepper=pin_pepper,
        kiosk_admin_pin=getattr(settings, "KIOSK_ADMIN_PIN", None),
        relying_party=RelyingParty(
            rp_id=getattr(settings, "RP_ID", "localhost"),
            rp_name=getattr(settings, "RP_NAME", "ROME Warehouse"),
            origin=getattr(settings, "ORIGIN", "http://localhost:5000"),
        ),
        resend_api_key=getattr(settings, "RESEND_API_KEY", None),
        from_email=getattr(settings, "FROM_EMAIL", None),
        clock=clock,
    )
    app.extensions["rome_timeclock"] = container

    register_workers(app, container)
    register_punches(app, container)
    register_production(app, container)
    register_timeoff(app, container)
    register_passkeys(app, container)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    return app
