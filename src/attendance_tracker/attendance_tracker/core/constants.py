"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Kolkata"
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 75
WARNING_ATTENDANCE_THRESHOLD = 50
HOLIDAY_REASON_MAX_LENGTH = 255
ABSENCE_REASON_MAX_LENGTH = 500
ISO_DATE_FORMAT = "%Y-%m-%d"
