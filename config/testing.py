SECRET_KEY = "test-secret"

# Tests always run against the in-memory repositories
DB_CONFIG = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SESSION_DAYS = 7
PIN_PEPPER = "test-pepper"
KIOSK_ADMIN_PIN = "000000"

RP_ID = "localhost"
RP_NAME = "ROME Warehouse"
ORIGIN = "http://localhost:5000"

RESEND_API_KEY = None
FROM_EMAIL = "ROME <noreply@resend.dev>"

LOG_LEVEL = "WARNING"
LOG_FILE = None
