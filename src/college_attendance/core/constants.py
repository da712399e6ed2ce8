"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ACADEMIC_YEAR_START_MONTH = 9
ACADEMIC_YEAR_END_MONTH = 7
SEMESTER2_START_MONTH = 2

DEFAULT_TIMEZONE = "Asia/Almaty"
DEFAULT_TOKEN_TTL_HOURS = 8
DEFAULT_QR_TOKEN_TTL_MINUTES = 10

MIN_PASSWORD_LENGTH = 6
MAX_IMPORT_ERRORS = 50
