"""
Per-user and per-group due date extensions.

Saving or deleting an override also keeps its calendar event in step and
regrades every learner it affects, so penalties always follow the current
effective due date.
"""
import logging

from quiz_duedate.core.exceptions import (
    NoDueDateConfiguredError,
    NotFoundError,
    OverrideConflictError,
    ValidationError,
)
from quiz_duedate.models.override import Override
from quiz_duedate.models.quiz import Quiz
from quiz_duedate.services.events import EventContext
from quiz_duedate.services.grades import GradeSink, best_raw_grade, finished_attempts
from quiz_duedate.services.settings import calendar_event_name
from quiz_duedate.services.stores import (
    OVERRIDE_MODES,
    CalendarSink,
    GroupMembership,
    OverrideStore,
    PolicyStore,
    QuizStore,
)

logger = logging.getLogger(__name__)


class OverrideManager:
    def __init__(self, ctx: EventContext):
        self.ctx = ctx
        self.db = ctx.db
        self.store = OverrideStore(ctx.db)
        self.calendar = CalendarSink(ctx.db)
        self.memberships = GroupMembership(ctx.db)

    def _require_due_date(self, quiz_id: int) -> None:
        policy = PolicyStore(self.db).get_policy(quiz_id)
        if policy is None or not policy.due_date:
            raise NoDueDateConfiguredError(quiz_id)

    def get(self, override_id: int) -> Override:
        override = self.store.get(override_id)
        if override is None:
            raise NotFoundError(f"Override {override_id} not found")
        return override

    def list_overrides(self, quiz_id: int, mode: str = "") -> list[Override]:
        if mode and mode not in OVERRIDE_MODES:
            raise ValidationError({"mode": "Mode must be 'user' or 'group'."})
        return self.store.list_overrides(quiz_id, mode)

    def user_override_exists(self, quiz_id: int, user_id: int, exclude_id: int = 0) -> bool:
        return self.store.user_override_exists(quiz_id, user_id, exclude_id)

    def group_override_exists(self, quiz_id: int, group_id: int, exclude_id: int = 0) -> bool:
        return self.store.group_override_exists(quiz_id, group_id, exclude_id)

    def validate(self, quiz: Quiz, user_id, group_id, due_date, override_id: int = 0) -> None:
        errors: dict[str, str] = {}
        if (user_id is None) == (group_id is None):
            errors["scope"] = "Choose exactly one of a user or a group."
        if not due_date:
            errors["due_date"] = "Required"
        if group_id is not None:
            group = self.memberships.get_group(group_id)
            if group is None or group.course_id != quiz.course_id:
                errors["group_id"] = "Group does not belong to this course."
        if errors:
            raise ValidationError(errors)

        if user_id is not None and self.user_override_exists(quiz.id, user_id, override_id):
            raise OverrideConflictError("user_id")
        if group_id is not None and self.group_override_exists(quiz.id, group_id, override_id):
            raise OverrideConflictError("group_id")

    def save_override(
        self,
        quiz_id: int,
        due_date: int,
        user_id: int | None = None,
        group_id: int | None = None,
        override_id: int = 0,
    ) -> Override:
        quiz = QuizStore(self.db).require_quiz(quiz_id)
        self._require_due_date(quiz_id)

        if override_id:
            override = self.get(override_id)
            if override.quiz_id != quiz_id:
                raise NotFoundError(f"Override {override_id} not found")
            # scope is fixed once created
            user_id, group_id = override.user_id, override.group_id
        else:
            override = Override(quiz_id=quiz_id)

        self.validate(quiz, user_id, group_id, due_date, override_id)

        override.user_id = user_id
        override.group_id = group_id
        override.due_date = due_date
        self.store.upsert_override(override)

        self.update_calendar_event(override, quiz)
        self.recalculate_grades_for_override(override)

        logger.info(
            "saved due date override %s on quiz %s (%s)",
            override.id,
            quiz_id,
            f"user {user_id}" if user_id is not None else f"group {group_id}",
        )
        return override

    def delete_override(self, override_id: int) -> None:
        override = self.get(override_id)
        quiz_id, user_id, group_id = override.quiz_id, override.user_id, override.group_id

        self.delete_calendar_event(override)
        self.store.delete_override(override_id)

        # learners now fall back to a group override or the quiz default
        self._recalculate(quiz_id, user_id, group_id)
        logger.info("deleted due date override %s on quiz %s", override_id, quiz_id)

    def delete_all_overrides(self, quiz_id: int) -> int:
        for override in self.store.list_overrides(quiz_id):
            self.delete_calendar_event(override)
        return self.store.delete_all(quiz_id)

    def update_calendar_event(self, override: Override, quiz: Quiz) -> None:
        self.calendar.upsert(
            quiz,
            override.due_date,
            calendar_event_name(quiz),
            user_id=override.user_id or 0,
            group_id=override.group_id or 0,
        )

    def delete_calendar_event(self, override: Override) -> None:
        self.calendar.delete(override.quiz_id, override.user_id or 0, override.group_id or 0)

    def recalculate_grades_for_user(self, quiz_id: int, user_id: int) -> bool:
        """
        Re-push the learner's quiz grade so the grade handler recomputes the
        penalty against the current effective due date.
        """
        attempts = finished_attempts(self.db, quiz_id, user_id)
        if not attempts:
            return False

        quiz = QuizStore(self.db).get_quiz(quiz_id)
        if quiz is None:
            return False

        grades = GradeSink(self.ctx)
        # a null final grade guarantees the push counts as a change
        grades.reset(quiz_id, user_id)
        grades.push_raw_grade(quiz_id, user_id, best_raw_grade(attempts, quiz.grade_method))
        return True

    def recalculate_grades_for_override(self, override: Override) -> None:
        self._recalculate(override.quiz_id, override.user_id, override.group_id)

    def _recalculate(self, quiz_id: int, user_id: int | None, group_id: int | None) -> None:
        if user_id is not None:
            self.recalculate_grades_for_user(quiz_id, user_id)
        elif group_id is not None:
            for member_id in self.memberships.members(group_id):
                self.recalculate_grades_for_user(quiz_id, member_id)
