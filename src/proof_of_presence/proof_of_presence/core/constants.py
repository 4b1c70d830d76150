"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_STUDENTS = 50
MIN_PASSWORD_LENGTH = 6
DOCUMENT_ID_LENGTH = 20

DASHBOARD_RECENT_LIMIT = 10
DASHBOARD_ALL_LIMIT = 100
DASHBOARD_WEEK_DAYS = 7

FACE_MATCH_THRESHOLD = 0.8
DEFAULT_ATTENDANCE_METHOD = "face_recognition"
