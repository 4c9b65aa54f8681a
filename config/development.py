import os

from config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# No DB_HOST -> demo mode with in-memory data
DB_CONFIG = db_config_from_env()

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also upsert the demo workers on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
PIN_PEPPER = os.getenv("PIN_PEPPER", "dev-pin-pepper")
KIOSK_ADMIN_PIN = os.getenv("KIOSK_ADMIN_PIN", "000000")

# WebAuthn relying party
RP_ID = os.getenv("RP_ID", "localhost")
RP_NAME = os.getenv("RP_NAME", "ROME Warehouse")
ORIGIN = os.getenv("ORIGIN", "http://localhost:5000")

# Without a key, verification codes are written to the log
RESEND_API_KEY = os.getenv("RESEND_API_KEY") or None
FROM_EMAIL = os.getenv("FROM_EMAIL", "ROME <noreply@resend.dev>")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/rome_timeclock.log")
