"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PIN_LENGTH = 6
CODE_LENGTH = 6

DEFAULT_SESSION_DAYS = 7
PENDING_LOGIN_MINUTES = 10

VERIFICATION_CODE_TTL_MINUTES = 10
VERIFICATION_RESEND_COOLDOWN_SECONDS = 60
PASSKEY_CHALLENGE_TTL_MINUTES = 5

DEFAULT_HISTORY_DAYS = 14
MAX_HISTORY_DAYS = 366
DEFAULT_REQUEST_LIMIT = 50

# time_off_requests.paid_hours / unpaid_hours are DECIMAL(6, 2)
MAX_HOURS = 9999.99
