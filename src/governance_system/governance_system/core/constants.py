"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TRANSACTION_CODE_LENGTH = 8
DEFAULT_NOTIFICATION_LIMIT = 20
DEFAULT_TOKEN_MAX_AGE_SECONDS = 7 * 24 * 3600
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10
DEFAULT_NOTIFICATION_QUEUE_SIZE = 1000
MIN_PASSWORD_LENGTH = 6
