import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

DATABASE_URL = os.getenv(
    "QUIZ_DUEDATE_DATABASE_URL", f"sqlite:///{BASE_DIR}/quiz_duedate.db"
)
LOG_LEVEL = os.getenv("QUIZ_DUEDATE_LOG_LEVEL", "INFO")

# Late policy
SECONDS_PER_DAY = 86400
DEFAULT_PENALTY_CAP = 100  # implicit cap when no explicit cap is enabled

# tag written alongside grades this service adjusts
GRADE_SOURCE = "quizaccess_duedate"

# host grade methods
GRADE_METHOD_HIGHEST = "highest"
GRADE_METHOD_AVERAGE = "average"
GRADE_METHOD_FIRST = "first"
GRADE_METHOD_LAST = "last"
