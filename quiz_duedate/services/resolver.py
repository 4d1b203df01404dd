"""
Effective due date resolution.

Precedence: user override > group overrides (latest wins) > quiz default.
Nothing here writes or caches; overrides and group membership can change
between calls, and a stale date means a wrong grade.
"""
import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from quiz_duedate.models.override import Override
from quiz_duedate.models.policy import QuizDueDatePolicy
from quiz_duedate.services.stores import GroupMembership, OverrideStore, PolicyStore, QuizStore

logger = logging.getLogger(__name__)


def effective_due_date(
    policy: QuizDueDatePolicy | None,
    user_override: Override | None,
    group_overrides: Iterable[Override],
) -> int | None:
    if policy is None or not policy.due_date:
        return None

    if user_override is not None:
        return int(user_override.due_date)

    group_dates = [int(o.due_date) for o in group_overrides]
    if group_dates:
        # most permissive extension applies
        return max(group_dates)

    return int(policy.due_date)


class DueDateResolver:
    def __init__(
        self,
        policies: PolicyStore,
        overrides: OverrideStore,
        memberships: GroupMembership,
        quizzes: QuizStore,
    ):
        self.policies = policies
        self.overrides = overrides
        self.memberships = memberships
        self.quizzes = quizzes

    @classmethod
    def for_session(cls, db: Session) -> "DueDateResolver":
        return cls(PolicyStore(db), OverrideStore(db), GroupMembership(db), QuizStore(db))

    def resolve(self, quiz_id: int, user_id: int) -> int | None:
        policy = self.policies.get_policy(quiz_id)
        if policy is None or not policy.due_date:
            return None

        user_override = self.overrides.get_override_by_user(quiz_id, user_id)
        if user_override is not None:
            return effective_due_date(policy, user_override, [])

        group_overrides: list[Override] = []
        quiz = self.quizzes.get_quiz(quiz_id)
        if quiz is None:
            logger.debug("quiz %s missing from host, using default due date", quiz_id)
        else:
            group_ids = self.memberships.groups_for_user(quiz.course_id, user_id)
            group_overrides = self.overrides.get_overrides_by_groups(quiz_id, group_ids)

        return effective_due_date(policy, None, group_overrides)


def resolve(db: Session, quiz_id: int, user_id: int) -> int | None:
    return DueDateResolver.for_session(db).resolve(quiz_id, user_id)
