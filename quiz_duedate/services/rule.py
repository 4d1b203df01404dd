"""Learner facing messages describing a quiz's due date and late penalty."""
from datetime import datetime, timezone

from quiz_duedate.models.policy import QuizDueDatePolicy

DATE_FORMAT = "%A, %d %B %Y, %H:%M %Z"


def format_timestamp(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime(DATE_FORMAT)


def _percent(value) -> str:
    return f"{float(value):g}"


def evaluate(policy: QuizDueDatePolicy | None, now: int, due_date: int | None = None) -> list[str]:
    """
    Messages shown to learners before they start the quiz.

    ``due_date`` is the learner's effective due date when known; it defaults
    to the quiz's own due date. ``now`` is accepted so callers can decide on
    time sensitive wording; an elapsed due date adds a note.
    """
    if policy is None or not policy.due_date:
        return []

    due = due_date or policy.due_date
    messages = [f"This quiz is due on {format_timestamp(due)}."]

    if policy.penalty_enabled:
        if policy.penalty_cap_enabled and policy.penalty_cap:
            cap = _percent(policy.penalty_cap)
        else:
            cap = "100"
        messages.append(
            f"Submissions after the due date will be penalized by "
            f"{_percent(policy.penalty_rate)}% per day, up to a maximum of {cap}%."
        )
        if now > due:
            messages.append("The due date has passed; the late penalty applies to new submissions.")

    return messages
