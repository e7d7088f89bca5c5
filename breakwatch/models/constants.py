"""Constants for breakwatch.

This module centralizes the vendor strings, fallbacks and default values used throughout the application.
"""


# Vendor event types
APB_EVENT_PREFIX = "DOOR_APB_"

# Fallbacks for missing vendor fields
UNKNOWN_USER_ID = "unknown"
UNKNOWN_USER_NAME = "Unknown User"
UNKNOWN_SITE_NAME = "Unknown Site"
UNKNOWN_DOOR_NAME = "Door"
DEFAULT_TIMEZONE = "UTC"

# Report
BREAK_AREA_LABEL = "Break Room"
DEFAULT_MIN_MINUTES = 45
MS_PER_MINUTE = 60 * 1000

# Display formats (door local time)
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
