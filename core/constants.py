# core/constants.py
STATUS_PENDING = "Pending"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
ALLOWED_STATUSES = (STATUS_PENDING, STATUS_IN_PROGRESS, STATUS_COMPLETED)
STATUS_ALIASES = {"InProgress": STATUS_IN_PROGRESS}

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ALLOWED_ROLES = (ROLE_USER, ROLE_ADMIN)

WEAK_SUBJECT_THRESHOLD_PCT = 20
WEEK_DAYS = 7
STREAK_ACTIVE_DAYS = 5

LEVEL_EXCELLENT = "Excellent"
LEVEL_AVERAGE = "Average"
LEVEL_POOR = "Poor"
EXCELLENT_MIN_SCORE = 71
AVERAGE_MIN_SCORE = 41

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
WEEKEND_LABELS = ("Sat", "Sun")

SESSIONS_COLLECTION = "studies"
USERS_COLLECTION = "users"
