"""
SQLAlchemy-backed stores the engine reads from and writes to.

Every store works on the caller's session and only flushes; committing is
left to the request that owns the session.
"""
import time
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quiz_duedate.core.exceptions import NotFoundError, OverrideConflictError
from quiz_duedate.models.calendar_event import CalendarEvent
from quiz_duedate.models.group import Group, GroupMember
from quiz_duedate.models.override import Override
from quiz_duedate.models.policy import QuizDueDatePolicy
from quiz_duedate.models.quiz import Quiz

OVERRIDE_MODES = ("user", "group")


class QuizStore:
    def __init__(self, db: Session):
        self.db = db

    def get_quiz(self, quiz_id: int) -> Quiz | None:
        return self.db.get(Quiz, quiz_id)

    def require_quiz(self, quiz_id: int) -> Quiz:
        quiz = self.get_quiz(quiz_id)
        if quiz is None:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return quiz


class PolicyStore:
    def __init__(self, db: Session):
        self.db = db

    def get_policy(self, quiz_id: int) -> QuizDueDatePolicy | None:
        return self.db.scalars(
            select(QuizDueDatePolicy).where(QuizDueDatePolicy.quiz_id == quiz_id)
        ).first()

    def put_policy(self, policy: QuizDueDatePolicy) -> QuizDueDatePolicy:
        self.db.add(policy)
        self.db.flush()
        return policy

    def delete_policy(self, quiz_id: int) -> None:
        policy = self.get_policy(quiz_id)
        if policy is not None:
            self.db.delete(policy)
            self.db.flush()


class OverrideStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, override_id: int) -> Override | None:
        return self.db.get(Override, override_id)

    def get_override_by_user(self, quiz_id: int, user_id: int) -> Override | None:
        return self.db.scalars(
            select(Override).where(Override.quiz_id == quiz_id, Override.user_id == user_id)
        ).first()

    def get_overrides_by_groups(self, quiz_id: int, group_ids: Iterable[int]) -> list[Override]:
        group_ids = list(group_ids)
        if not group_ids:
            return []
        return list(
            self.db.scalars(
                select(Override).where(
                    Override.quiz_id == quiz_id, Override.group_id.in_(group_ids)
                )
            )
        )

    def list_overrides(self, quiz_id: int, mode: str = "") -> list[Override]:
        stmt = select(Override).where(Override.quiz_id == quiz_id)
        if mode == "user":
            stmt = stmt.where(Override.user_id.is_not(None))
        elif mode == "group":
            stmt = stmt.where(Override.group_id.is_not(None))
        return list(self.db.scalars(stmt.order_by(Override.id)))

    def list_for_user(self, user_id: int) -> list[Override]:
        return list(
            self.db.scalars(
                select(Override).where(Override.user_id == user_id).order_by(Override.id)
            )
        )

    def user_override_exists(self, quiz_id: int, user_id: int, exclude_id: int = 0) -> bool:
        stmt = select(Override.id).where(Override.quiz_id == quiz_id, Override.user_id == user_id)
        if exclude_id:
            stmt = stmt.where(Override.id != exclude_id)
        return self.db.scalars(stmt).first() is not None

    def group_override_exists(self, quiz_id: int, group_id: int, exclude_id: int = 0) -> bool:
        stmt = select(Override.id).where(Override.quiz_id == quiz_id, Override.group_id == group_id)
        if exclude_id:
            stmt = stmt.where(Override.id != exclude_id)
        return self.db.scalars(stmt).first() is not None

    def upsert_override(self, override: Override) -> int:
        override.last_modified = int(time.time())
        self.db.add(override)
        try:
            self.db.flush()
        except IntegrityError as exc:
            # lost a race against another writer for the same scope
            field = "user_id" if override.user_id is not None else "group_id"
            raise OverrideConflictError(field) from exc
        return override.id

    def delete_override(self, override_id: int) -> None:
        override = self.get(override_id)
        if override is not None:
            self.db.delete(override)
            self.db.flush()

    def delete_all(self, quiz_id: int) -> int:
        overrides = self.list_overrides(quiz_id)
        for override in overrides:
            self.db.delete(override)
        self.db.flush()
        return len(overrides)


class GroupMembership:
    def __init__(self, db: Session):
        self.db = db

    def groups_for_user(self, course_id: int, user_id: int) -> set[int]:
        rows = self.db.scalars(
            select(GroupMember.group_id)
            .join(Group, Group.id == GroupMember.group_id)
            .where(Group.course_id == course_id, GroupMember.user_id == user_id)
        )
        return set(rows)

    def members(self, group_id: int) -> list[int]:
        return list(
            self.db.scalars(
                select(GroupMember.user_id)
                .where(GroupMember.group_id == group_id)
                .order_by(GroupMember.user_id)
            )
        )

    def get_group(self, group_id: int) -> Group | None:
        return self.db.get(Group, group_id)


class CalendarSink:
    """Keeps one "due" event per (quiz, scope). Not part of grading correctness."""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, quiz_id: int, user_id: int = 0, group_id: int = 0) -> CalendarEvent | None:
        return self.db.scalars(
            select(CalendarEvent).where(
                CalendarEvent.quiz_id == quiz_id,
                CalendarEvent.event_type == "due",
                CalendarEvent.user_id == (user_id or 0),
                CalendarEvent.group_id == (group_id or 0),
            )
        ).first()

    def upsert(
        self,
        quiz: Quiz,
        time_start: int,
        name: str,
        description: str = "",
        user_id: int = 0,
        group_id: int = 0,
    ) -> CalendarEvent:
        event = self._find(quiz.id, user_id, group_id)
        if event is None:
            event = CalendarEvent(
                quiz_id=quiz.id,
                course_id=quiz.course_id,
                user_id=user_id or 0,
                group_id=group_id or 0,
                event_type="due",
            )
            self.db.add(event)

        event.name = name
        event.description = description
        event.time_start = time_start
        self.db.flush()
        return event

    def delete(self, quiz_id: int, user_id: int = 0, group_id: int = 0) -> bool:
        event = self._find(quiz_id, user_id, group_id)
        if event is None:
            return False
        self.db.delete(event)
        self.db.flush()
        return True
