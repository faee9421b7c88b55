"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_MINUTES = 12 * 60
DEFAULT_JWT_ALGORITHM = "HS256"
STORE_RETRY_AFTER_SECONDS = 5
PERCENTAGE_PLACES = 2

# MySQL server error numbers the repositories translate.
ER_DUP_ENTRY = 1062
ER_NO_REFERENCED_ROW = 1452
