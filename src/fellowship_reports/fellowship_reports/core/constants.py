"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TREND_WINDOW = 5
DEFAULT_DASHBOARD_EVENTS = 5
DEFAULT_PUBLISHED_LIMIT = 50

# System tag names
TAG_FIRST_TIMER = "PENDING_FIRST_ATTENDANCE"
TAG_ALUMNI = "ALUMNI"
TAG_FINALIST = "FINALIST"
TAG_VOLUNTEER = "CHECK_IN_VOLUNTEER"

NO_FAMILY = "No Family"
NO_TEAM = "No Team"

MEMBER_TYPE_STUDENT = "Makerere Students"
MEMBER_TYPE_ALUMNI = "Alumni"
MEMBER_TYPE_OTHER = "Non-Makerere / Other"

# User-facing messages; never extend these with the reason for a denial.
MSG_INSUFFICIENT_PERMISSIONS = "Insufficient permissions to view reports"
MSG_REPORT_NOT_AVAILABLE = "Report not yet available"
MSG_MANAGER_ONLY = "This action is restricted to Fellowship Managers only"
