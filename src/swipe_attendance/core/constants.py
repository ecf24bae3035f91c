"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

HISTORY_RETENTION_DAYS = 30
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100
DASHBOARD_WINDOW_DAYS = 7
DASHBOARD_RECENT_LIMIT = 5

MIN_STUDENT_AGE = 5
MAX_STUDENT_AGE = 25
MIN_PASSWORD_LENGTH = 6

DEFAULT_STUDENT_PHOTO = (
    "https://images.unsplash.com/photo-1486312338219-ce68d2c6f44d?w=400&h=400&fit=crop&crop=face"
)

# Quick login creates placeholder accounts at <name>@temp.com.
QUICK_LOGIN_EMAIL_DOMAIN = "temp.com"
QUICK_LOGIN_DEFAULT_PASSWORD = "defaultpass123"

# Keeps a walk's state inside one signed session cookie.
MAX_ROSTER_SIZE = 400
