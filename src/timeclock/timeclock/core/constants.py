"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR

# Break deduction tiers (elapsed minutes, lower bound inclusive)
LONG_SHIFT_MINUTES = 8 * MINUTES_PER_HOUR
LONG_SHIFT_BREAK_MINUTES = 60
MEDIUM_SHIFT_MINUTES = 6 * MINUTES_PER_HOUR + 15
MEDIUM_SHIFT_BREAK_MINUTES = 45
SHORT_SHIFT_MINUTES = 6 * MINUTES_PER_HOUR

DEFAULT_SESSION_DAYS = 7
DEFAULT_TIMEZONE = "Asia/Tokyo"
MIN_ADMIN_PASSWORD_LENGTH = 4
ADMIN_PASSWORD_SETTING_KEY = "admin_password_hash"
