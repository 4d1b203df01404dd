from types import SimpleNamespace

from quiz_duedate.models.override import Override
from quiz_duedate.models.policy import QuizDueDatePolicy
from quiz_duedate.services.resolver import effective_due_date, resolve
from tests.conftest import (
    DAY,
    DUE,
    GROUP_A,
    GROUP_B,
    GROUP_OTHER_COURSE,
    QUIZ_NO_POLICY,
    QUIZ_PENALTY,
    USER_A,
    USER_AB,
    USER_NO_GROUPS,
)


def add_override(db, **kwargs):
    db.add(Override(quiz_id=QUIZ_PENALTY, **kwargs))
    db.commit()


def test_falls_back_to_quiz_due_date(db):
    assert resolve(db, QUIZ_PENALTY, USER_NO_GROUPS) == DUE
    assert resolve(db, QUIZ_PENALTY, USER_AB) == DUE


def test_no_policy_means_no_due_date(db):
    assert resolve(db, QUIZ_NO_POLICY, USER_AB) is None


def test_zero_due_date_means_no_due_date(db):
    policy = db.query(QuizDueDatePolicy).filter_by(quiz_id=QUIZ_PENALTY).one()
    policy.due_date = 0
    db.commit()

    add_override(db, user_id=USER_AB, due_date=DUE + DAY)
    assert resolve(db, QUIZ_PENALTY, USER_AB) is None


def test_user_override_beats_group_overrides(db):
    add_override(db, group_id=GROUP_A, due_date=DUE + 5 * DAY)
    add_override(db, user_id=USER_AB, due_date=DUE + 2 * DAY)

    assert resolve(db, QUIZ_PENALTY, USER_AB) == DUE + 2 * DAY


def test_user_override_applies_even_when_earlier(db):
    add_override(db, group_id=GROUP_A, due_date=DUE + 5 * DAY)
    add_override(db, user_id=USER_AB, due_date=DUE - DAY)

    assert resolve(db, QUIZ_PENALTY, USER_AB) == DUE - DAY


def test_latest_group_override_wins(db):
    add_override(db, group_id=GROUP_A, due_date=DUE + DAY)
    add_override(db, group_id=GROUP_B, due_date=DUE + 3 * DAY)

    assert resolve(db, QUIZ_PENALTY, USER_AB) == DUE + 3 * DAY
    assert resolve(db, QUIZ_PENALTY, USER_A) == DUE + DAY


def test_group_override_can_shorten_the_default(db):
    add_override(db, group_id=GROUP_A, due_date=DUE - DAY)
    assert resolve(db, QUIZ_PENALTY, USER_A) == DUE - DAY


def test_user_without_groups_gets_default(db):
    add_override(db, group_id=GROUP_A, due_date=DUE + DAY)
    assert resolve(db, QUIZ_PENALTY, USER_NO_GROUPS) == DUE


def test_groups_from_other_courses_are_ignored(db):
    add_override(db, group_id=GROUP_OTHER_COURSE, due_date=DUE + 9 * DAY)
    assert resolve(db, QUIZ_PENALTY, USER_NO_GROUPS) == DUE


def test_other_users_override_does_not_leak(db):
    add_override(db, user_id=USER_A, due_date=DUE + 4 * DAY)
    assert resolve(db, QUIZ_PENALTY, USER_AB) == DUE


def test_resolve_is_repeatable(db):
    add_override(db, group_id=GROUP_B, due_date=DUE + DAY)
    assert [resolve(db, QUIZ_PENALTY, USER_AB) for _ in range(3)] == [DUE + DAY] * 3


def test_effective_due_date_without_db():
    policy = SimpleNamespace(due_date=DUE)
    groups = [SimpleNamespace(due_date=DUE + DAY), SimpleNamespace(due_date=DUE + 2 * DAY)]

    assert effective_due_date(policy, None, []) == DUE
    assert effective_due_date(policy, None, groups) == DUE + 2 * DAY
    assert effective_due_date(policy, SimpleNamespace(due_date=DUE - 1), groups) == DUE - 1
    assert effective_due_date(None, None, groups) is None
