"""
Handlers for host notifications.

Each handler claims its name on the request-scoped guard before doing any
work, so a grade write made by a handler never re-enters that handler.
"""
import logging
import time
from decimal import Decimal

from sqlalchemy import select

from quiz_duedate.core.config import GRADE_METHOD_FIRST, GRADE_SOURCE
from quiz_duedate.models.penalty_audit import PenaltyAudit
from quiz_duedate.models.quiz_attempt import QuizAttempt
from quiz_duedate.services import settings
from quiz_duedate.services.events import (
    ATTEMPT_SUBMITTED,
    QUIZ_SAVED,
    USER_GRADED,
    EventBus,
    EventContext,
)
from quiz_duedate.services.grades import GradeSink, first_finished_attempt
from quiz_duedate.services.penalty import compute_penalty, penalty_active
from quiz_duedate.services.resolver import DueDateResolver
from quiz_duedate.services.stores import PolicyStore, QuizStore

logger = logging.getLogger(__name__)


def penalty_feedback(percent: Decimal) -> str:
    if percent <= 0:
        return ""
    return f"Late penalty of {percent.normalize():f}% applied."


def record_penalty(db, quiz_id: int, attempt_id: int, percent: Decimal) -> PenaltyAudit:
    audit = db.scalars(select(PenaltyAudit).where(PenaltyAudit.attempt_id == attempt_id)).first()
    if audit is None:
        audit = PenaltyAudit(quiz_id=quiz_id, attempt_id=attempt_id)
        db.add(audit)
    audit.penalty_applied = percent
    audit.last_modified = int(time.time())
    db.flush()
    return audit


def attempt_submitted(ctx: EventContext, attempt_id: int) -> None:
    """Release a previously pinned grade so the quiz can push the new one."""
    with ctx.guard.claim(ATTEMPT_SUBMITTED) as claimed:
        if not claimed:
            return

        attempt = ctx.db.get(QuizAttempt, attempt_id)
        if attempt is None:
            logger.debug("attempt %s not found, nothing to do", attempt_id)
            return

        policy = PolicyStore(ctx.db).get_policy(attempt.quiz_id)
        if not penalty_active(policy):
            return

        quiz = QuizStore(ctx.db).get_quiz(attempt.quiz_id)
        if quiz is None:
            return

        # with first-attempt grading only the first finished attempt counts
        first = first_finished_attempt(ctx.db, attempt.quiz_id, attempt.user_id)
        if quiz.grade_method == GRADE_METHOD_FIRST and (first is None or first.id != attempt.id):
            return

        grades = GradeSink(ctx)
        grade = grades.get(attempt.quiz_id, attempt.user_id)
        if grade is not None and grade.overridden:
            # the next push lands in full and is penalised and pinned again
            grades.reset(attempt.quiz_id, attempt.user_id)
            logger.info(
                "cleared pinned grade for user %s on quiz %s", attempt.user_id, attempt.quiz_id
            )


def user_graded(ctx: EventContext, quiz_id: int, user_id: int) -> None:
    """Apply the late penalty to a freshly pushed quiz grade."""
    with ctx.guard.claim(USER_GRADED) as claimed:
        if not claimed:
            return

        policy = PolicyStore(ctx.db).get_policy(quiz_id)
        if not penalty_active(policy):
            logger.debug("no active penalty for quiz %s", quiz_id)
            return

        quiz = QuizStore(ctx.db).get_quiz(quiz_id)
        if quiz is None:
            return

        due = DueDateResolver.for_session(ctx.db).resolve(quiz_id, user_id)
        if not due:
            return

        # the first finished attempt decides lateness, whatever attempt is graded
        first = first_finished_attempt(ctx.db, quiz_id, user_id)
        if first is None:
            return

        grades = GradeSink(ctx)
        grade = grades.get(quiz_id, user_id)
        if grade is None or grade.raw_grade is None:
            return
        if grade.overridden:
            logger.debug("grade for user %s on quiz %s is pinned", user_id, quiz_id)
            return

        result = compute_penalty(due, first.time_finish, policy, grade.raw_grade, quiz.grade_max)

        if result.adjusted_grade >= 0:
            grades.apply_grade(
                quiz_id,
                user_id,
                result.adjusted_grade,
                GRADE_SOURCE,
                penalty_feedback(result.penalty_percent),
            )
        record_penalty(ctx.db, quiz_id, first.id, result.penalty_percent)

        if result.penalty_percent > 0:
            logger.info(
                "late penalty %s%% (%d day(s)) applied to user %s on quiz %s",
                result.penalty_percent,
                result.days_late,
                user_id,
                quiz_id,
            )

        # pin the penalised first attempt so later attempts cannot replace it
        if quiz.grade_method == GRADE_METHOD_FIRST and result.penalty_percent > 0:
            grades.set_overridden(quiz_id, user_id, True)


def quiz_saved(ctx: EventContext, quiz_id: int) -> None:
    """Rebuild the quiz level calendar event after the host saves the quiz."""
    with ctx.guard.claim(QUIZ_SAVED) as claimed:
        if not claimed:
            return

        quiz = QuizStore(ctx.db).get_quiz(quiz_id)
        if quiz is None:
            return
        settings.sync_quiz_calendar_event(ctx.db, quiz)


def build_event_bus() -> EventBus:
    bus = EventBus()
    bus.subscribe(ATTEMPT_SUBMITTED, attempt_submitted)
    bus.subscribe(USER_GRADED, user_graded)
    bus.subscribe(QUIZ_SAVED, quiz_saved)
    return bus


event_bus = build_event_bus()
