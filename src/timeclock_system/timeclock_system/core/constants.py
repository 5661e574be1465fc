"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE

DEFAULT_TIMEZONE = "Europe/Madrid"
DEFAULT_HOURS_LIMIT = 40
DEFAULT_SESSION_DAYS = 7
