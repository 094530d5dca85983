"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEE_ROLE_NAME = "EMPLOYEE"
MANAGER_ROLE_NAME = "MANAGER"

# Employee fields visible only to ALL-scope readers and to the employee themselves.
SENSITIVE_EMPLOYEE_FIELDS = ("phone", "date_of_birth", "hire_date")

DEFAULT_ROLE_CACHE_TTL_SECONDS = 300

ABSENCE_REASON_MAX_LENGTH = 1000
REVIEW_COMMENT_MAX_LENGTH = 500

FEEDBACK_MIN_LENGTH = 10
FEEDBACK_MAX_LENGTH = 2000
FEEDBACK_MIN_RATING = 1
FEEDBACK_MAX_RATING = 5

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
BIO_MAX_LENGTH = 1000
PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"
