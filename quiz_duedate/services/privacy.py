"""Export and erasure of the personal data this service keeps: user overrides."""
import logging

from sqlalchemy.orm import Session

from quiz_duedate.services.rule import format_timestamp
from quiz_duedate.services.stores import CalendarSink, OverrideStore

logger = logging.getLogger(__name__)


def export_user_data(db: Session, user_id: int) -> list[dict]:
    return [
        {
            "quiz_id": o.quiz_id,
            "due_date": o.due_date,
            "due_date_display": format_timestamp(o.due_date),
            "last_modified": o.last_modified,
        }
        for o in OverrideStore(db).list_for_user(user_id)
    ]


def delete_data_for_user(db: Session, user_id: int, quiz_ids: list[int] | None = None) -> int:
    overrides = OverrideStore(db).list_for_user(user_id)
    if quiz_ids is not None:
        overrides = [o for o in overrides if o.quiz_id in quiz_ids]

    calendar = CalendarSink(db)
    for override in overrides:
        calendar.delete(override.quiz_id, user_id=user_id)
        db.delete(override)
    db.flush()

    logger.info("deleted %d override(s) for user %s", len(overrides), user_id)
    return len(overrides)


def delete_data_for_quiz(db: Session, quiz_id: int) -> int:
    overrides = OverrideStore(db).list_overrides(quiz_id, "user")

    calendar = CalendarSink(db)
    for override in overrides:
        calendar.delete(quiz_id, user_id=override.user_id)
        db.delete(override)
    db.flush()
    return len(overrides)
