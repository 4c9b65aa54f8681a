import os

from config import db_config_from_env

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
SESSION_COOKIE_SECURE = True
PIN_PEPPER = os.getenv("PIN_PEPPER", "please-set-PIN_PEPPER")
# Disabled unless explicitly configured
KIOSK_ADMIN_PIN = os.getenv("KIOSK_ADMIN_PIN") or None

RP_ID = os.getenv("RP_ID", "localhost")
RP_NAME = os.getenv("RP_NAME", "ROME Warehouse")
ORIGIN = os.getenv("ORIGIN", "https://localhost")

RESEND_API_KEY = os.getenv("RESEND_API_KEY") or None
FROM_EMAIL = os.getenv("FROM_EMAIL", "ROME <noreply@resend.dev>")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/rome_timeclock.log")
