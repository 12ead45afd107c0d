PASTEL_COLORS = [
    "#A0C4FF",
    "#FFADAD",
    "#CAFFBF",
    "#FFD6A5",
    "#BDB2FF",
    "#FFC6FF",
    "#9BF6FF",
]
FIXED_DEFAULT_COLOR = "#ffdd78"
DEFAULT_APPLE_RED = "#FF3B30"

DEFAULT_CATEGORY_ID = "default"
UNCATEGORIZED_LABEL = "기본 할 일"
SEEDED_CATEGORY_PREFIX = "cat-"

DEFAULT_CATEGORY_SEED = [
    ("cat-1", "Work", PASTEL_COLORS[0]),
    ("cat-2", "Personal", PASTEL_COLORS[1]),
]

DEFAULT_TIMEZONE = "Asia/Seoul"

LOCAL_TODOS_KEY = "kst_calendar_todos_guest"
LOCAL_CATEGORIES_KEY = "kst_calendar_categories_guest"
LOCAL_STORAGE_TABLE = "local_storage"

SEEN_CALENDAR_TUTORIAL_KEY = "seen_calendar_tutorial"
SEEN_TODO_TUTORIAL_KEY = "seen_todo_tutorial"

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
KOREAN_WEEKDAYS = ["일", "월", "화", "수", "목", "금", "토"]

VIEW_CALENDAR = "calendar"
VIEW_DAY = "day"

GUEST_NICKNAME = "Guest User"
DEFAULT_AUTH_PROVIDER = "kakao"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
