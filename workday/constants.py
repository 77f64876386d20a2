"""
Application constants and environment-driven configuration.
"""
import os

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/workday"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# Database
DEFAULT_DB_PATH = "./workday.db"

# API authentication; set WORKDAY_API_KEY in production
API_KEY_HEADER = "X-API-Key"
API_KEY = os.getenv("WORKDAY_API_KEY", "your-secret-key-change-me")

# Day record status codes (storage representation)
STATUS_UNSET = 0
STATUS_USER_REST = 1
STATUS_USER_WORK = 2
STATUS_USER_PARTIAL = 3

# Note length enforced at the edit boundary
NOTE_MAX_LENGTH = 15

# Pattern modes
MODE_STANDARD_WEEKDAY = 0
MODE_CUSTOM_WEEKLY = 1
MODE_SHIFT_CYCLE = 2

# Shift identifiers: 1 = early morning, 2 = morning, 3 = noon, 4 = night
SHIFT_SLOTS = {
    2: (2, 4),
    3: (2, 3, 4),
    4: (1, 2, 3, 4),
}
DEFAULT_SHIFT_SLOTS = 2

# Pattern defaults (weekly pattern is indexed Sunday=0)
DEFAULT_WEEKLY_PATTERN = [False, True, True, True, True, True, False]
DEFAULT_SHIFT_CYCLE_PATTERN = [True, True, True, True, False, False, False]
# Same length as DEFAULT_SHIFT_CYCLE_PATTERN: full shifts on cycle work days
DEFAULT_PARTIAL_SHIFT_PATTERN = [[2, 4], [2, 4], [2, 4], [2, 4], [], [], []]

# Holiday preferences
HOLIDAY_PREFERENCE_NONE = 0
HOLIDAY_PREFERENCE_CHINESE = 1
HOLIDAY_PREFERENCE_US = 2

HOLIDAY_FEED_URLS = {
    HOLIDAY_PREFERENCE_CHINESE: "https://calendars.icloud.com/holidays/cn_zh.ics",
    HOLIDAY_PREFERENCE_US: "https://www.opm.gov/policy-data-oversight/pay-leave/federal-holidays/holidays.ics",
}

# Feeds that mark work/rest days with X-APPLE-SPECIAL-DAY tags
TAGGED_HOLIDAY_PREFERENCES = {HOLIDAY_PREFERENCE_CHINESE}

HOLIDAY_PREFERENCE_NAMES = {
    HOLIDAY_PREFERENCE_NONE: "None",
    HOLIDAY_PREFERENCE_CHINESE: "Chinese Holidays",
    HOLIDAY_PREFERENCE_US: "US Federal Holidays",
}

# Holiday record types
HOLIDAY_TYPE_HOLIDAY = "holiday"
HOLIDAY_TYPE_REST = "rest"
HOLIDAY_TYPE_WORK = "work"

# Feed parsing
FEED_NAME_MAX_LENGTH = 50
FEED_SUMMARY_LANGUAGE = "zh_CN"
FEED_METADATA_MARKERS = ("TRANSP:", "CATEGORIES:", "X-APPLE-")
FEED_TAG_ALTERNATE_WORKDAY = "ALTERNATE-WORKDAY"
FEED_TAG_WORK_HOLIDAY = "WORK-HOLIDAY"

# Holiday fetch
FEED_TIMEOUT_SECONDS = float(os.getenv("WORKDAY_FEED_TIMEOUT", "20"))
HOLIDAY_REFRESH_HOUR = int(os.getenv("WORKDAY_HOLIDAY_REFRESH_HOUR", "4"))

# Resolution source tags
SOURCE_EXPLICIT = "explicit"
SOURCE_HOLIDAY = "holiday"
SOURCE_PATTERN = "pattern"

# Range queries
MAX_RANGE_DAYS = 366

# CORS
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("WORKDAY_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
