"""Quiz level due date settings: validation, persistence and calendar sync."""
import logging
from decimal import Decimal

from sqlalchemy import delete
from sqlalchemy.orm import Session

from quiz_duedate.core.exceptions import ValidationError
from quiz_duedate.models.penalty_audit import PenaltyAudit
from quiz_duedate.models.policy import QuizDueDatePolicy
from quiz_duedate.models.quiz import Quiz
from quiz_duedate.services.stores import CalendarSink, PolicyStore

logger = logging.getLogger(__name__)


def _out_of_range(value) -> bool:
    return not value or Decimal(str(value)) < 0 or Decimal(str(value)) > 100


def validate_policy(data, quiz: Quiz) -> dict[str, str]:
    """
    Returns field -> message for every rule ``data`` breaks.

    ``data`` is anything with the policy attributes (a request schema or a
    model row).
    """
    errors: dict[str, str] = {}

    if data.due_date and quiz.time_open and data.due_date < quiz.time_open:
        errors["due_date"] = "Due date must be after open date."
    if data.due_date and quiz.time_close and data.due_date > quiz.time_close:
        errors["due_date"] = "Due date must be before close date."

    if data.penalty_enabled and _out_of_range(data.penalty_rate):
        errors["penalty_rate"] = "Penalty must be between 0 and 100."
    if data.penalty_enabled and not data.due_date:
        errors["penalty_enabled"] = "Penalty cannot be enabled without a due date."

    if data.penalty_cap_enabled and _out_of_range(data.penalty_cap):
        errors["penalty_cap"] = "Penalty cap must be between 0 and 100."
    if data.penalty_cap_enabled and not data.penalty_enabled:
        errors["penalty_cap_enabled"] = "Penalty cap cannot be enabled without a penalty."

    return errors


def calendar_event_name(quiz: Quiz) -> str:
    return f"Due: {quiz.name}"


def sync_quiz_calendar_event(db: Session, quiz: Quiz) -> None:
    policy = PolicyStore(db).get_policy(quiz.id)
    calendar = CalendarSink(db)

    if policy is not None and policy.due_date:
        calendar.upsert(
            quiz,
            policy.due_date,
            calendar_event_name(quiz),
            description=f"Due date for quiz {quiz.name}",
        )
    else:
        calendar.delete(quiz.id)


def save_settings(db: Session, quiz: Quiz, data) -> QuizDueDatePolicy | None:
    """
    Validates and stores the policy for ``quiz``.

    A policy with neither a due date nor a penalty is removed outright.
    Returns the stored policy, or None when it was removed.
    """
    errors = validate_policy(data, quiz)
    if errors:
        raise ValidationError(errors)

    store = PolicyStore(db)
    policy = store.get_policy(quiz.id)

    if not data.due_date and not data.penalty_enabled:
        store.delete_policy(quiz.id)
        CalendarSink(db).delete(quiz.id)
        logger.info("due date settings removed for quiz %s", quiz.id)
        return None

    if policy is None:
        policy = QuizDueDatePolicy(quiz_id=quiz.id)

    policy.due_date = data.due_date or 0
    policy.penalty_enabled = bool(data.penalty_enabled)
    policy.penalty_rate = data.penalty_rate or 0
    policy.penalty_cap_enabled = bool(data.penalty_cap_enabled)
    policy.penalty_cap = data.penalty_cap or 0
    store.put_policy(policy)

    sync_quiz_calendar_event(db, quiz)
    logger.info(
        "due date settings saved for quiz %s (due %s, penalty %s)",
        quiz.id,
        policy.due_date,
        policy.penalty_rate if policy.penalty_enabled else "off",
    )
    return policy


def delete_settings(db: Session, quiz: Quiz) -> None:
    PolicyStore(db).delete_policy(quiz.id)
    db.execute(delete(PenaltyAudit).where(PenaltyAudit.quiz_id == quiz.id))
    CalendarSink(db).delete(quiz.id)
    db.flush()
