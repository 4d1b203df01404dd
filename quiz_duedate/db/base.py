from quiz_duedate.db.base_class import Base  # noqa: F401

# import models so Base.metadata knows every table
from quiz_duedate.models import (  # noqa: F401
    calendar_event,
    grade,
    group,
    override,
    penalty_audit,
    policy,
    quiz,
    quiz_attempt,
)
