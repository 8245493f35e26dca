"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ADMIN_ID = "admin-001"
ADMIN_NAME = "System Admin"
ADMIN_EMAIL = "nutan123@gmail.com"
ADMIN_PASSWORD = "Admin@123"

SETTINGS_ID = "global"
DEFAULT_SCHOOL_NAME = "Smart Attendance"
DEFAULT_ACADEMIC_YEAR = "2024-2025"

DEFAULT_SUBJECTS = (
    "Mathematics",
    "Physics",
    "Chemistry",
    "English Literature",
    "Computer Science",
    "History",
)

MIN_PASSWORD_LENGTH = 6

MAX_CIE1 = 20
MAX_CIE2 = 20
MAX_ASSIGNMENT = 10

MAX_ATTACHMENTS_BYTES = 5 * 1024 * 1024

GOOD_ATTENDANCE_PCT = 75
WARNING_ATTENDANCE_PCT = 60

# Local fallback store keys
STORAGE_KEY_USERS = "sa_users"
STORAGE_KEY_ATTENDANCE = "sa_attendance"
STORAGE_KEY_NOTICES = "sa_notices"
STORAGE_KEY_SETTINGS = "sa_settings"

DEFAULT_FALLBACK_LATENCY = 0.6
CONNECTION_PROBE_TIMEOUT = 2.0
