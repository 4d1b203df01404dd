"""Gradebook writes and the grade-changed notification they fire."""
import logging
import time
from statistics import mean

from sqlalchemy import select

from quiz_duedate.core.config import (
    GRADE_METHOD_AVERAGE,
    GRADE_METHOD_FIRST,
    GRADE_METHOD_LAST,
)
from quiz_duedate.models.grade import Grade
from quiz_duedate.models.quiz_attempt import QuizAttempt
from quiz_duedate.services.events import USER_GRADED, EventContext

logger = logging.getLogger(__name__)


def finished_attempts(db, quiz_id: int, user_id: int) -> list[QuizAttempt]:
    return list(
        db.scalars(
            select(QuizAttempt)
            .where(
                QuizAttempt.quiz_id == quiz_id,
                QuizAttempt.user_id == user_id,
                QuizAttempt.time_finish > 0,
            )
            .order_by(QuizAttempt.time_finish, QuizAttempt.id)
        )
    )


def first_finished_attempt(db, quiz_id: int, user_id: int) -> QuizAttempt | None:
    attempts = finished_attempts(db, quiz_id, user_id)
    return attempts[0] if attempts else None


def best_raw_grade(attempts: list[QuizAttempt], grade_method: str) -> float | None:
    """Raw grade for a list of finished attempts ordered by finish time."""
    grades = [a.raw_grade for a in attempts if a.raw_grade is not None]
    if not grades:
        return None
    if grade_method == GRADE_METHOD_FIRST:
        return grades[0]
    if grade_method == GRADE_METHOD_LAST:
        return grades[-1]
    if grade_method == GRADE_METHOD_AVERAGE:
        return mean(grades)
    return max(grades)


class GradeSink:
    def __init__(self, ctx: EventContext):
        self.ctx = ctx
        self.db = ctx.db

    def get(self, quiz_id: int, user_id: int) -> Grade | None:
        return self.db.scalars(
            select(Grade).where(Grade.quiz_id == quiz_id, Grade.user_id == user_id)
        ).first()

    def _get_or_create(self, quiz_id: int, user_id: int) -> Grade:
        grade = self.get(quiz_id, user_id)
        if grade is None:
            grade = Grade(quiz_id=quiz_id, user_id=user_id, overridden=False)
            self.db.add(grade)
        return grade

    def push_raw_grade(self, quiz_id: int, user_id: int, raw_grade: float | None) -> bool:
        """
        Record a raw grade computed by the quiz. An overridden grade keeps both
        its raw and final values. Fires USER_GRADED only when the raw grade
        changes or there is no final grade yet.
        """
        grade = self._get_or_create(quiz_id, user_id)
        if grade.overridden:
            self.db.flush()
            return False

        # final_grade may already carry a penalty, so compare raw to raw
        unchanged = grade.raw_grade == raw_grade and grade.final_grade is not None
        grade.raw_grade = raw_grade
        if unchanged:
            self.db.flush()
            return False

        grade.final_grade = raw_grade
        grade.source = "quiz"
        grade.last_modified = int(time.time())
        self.db.flush()

        self.ctx.publish(USER_GRADED, quiz_id=quiz_id, user_id=user_id)
        return True

    def apply_grade(
        self,
        quiz_id: int,
        user_id: int,
        adjusted_grade: float,
        source: str,
        feedback: str = "",
    ) -> Grade:
        grade = self._get_or_create(quiz_id, user_id)
        grade.final_grade = adjusted_grade
        grade.feedback = feedback or None
        grade.source = source
        grade.last_modified = int(time.time())
        self.db.flush()

        logger.debug("grade for user %s on quiz %s set to %s", user_id, quiz_id, adjusted_grade)
        self.ctx.publish(USER_GRADED, quiz_id=quiz_id, user_id=user_id)
        return grade

    def set_overridden(self, quiz_id: int, user_id: int, overridden: bool) -> Grade | None:
        grade = self.get(quiz_id, user_id)
        if grade is None:
            return None
        grade.overridden = overridden
        self.db.flush()
        return grade

    def reset(self, quiz_id: int, user_id: int) -> Grade | None:
        """Clear the override and the final grade so the next push always lands."""
        grade = self.get(quiz_id, user_id)
        if grade is None:
            return None
        grade.overridden = False
        grade.final_grade = None
        self.db.flush()
        return grade
