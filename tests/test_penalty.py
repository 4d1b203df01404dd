from decimal import Decimal
from types import SimpleNamespace

import pytest

from quiz_duedate.services.penalty import (
    compute_penalty,
    days_late,
    effective_cap,
    penalty_active,
)

DAY = 86400
DUE = 1_700_000_000


def make_policy(rate="10", cap_enabled=False, cap="0", due_date=DUE, enabled=True):
    return SimpleNamespace(
        due_date=due_date,
        penalty_enabled=enabled,
        penalty_rate=Decimal(rate),
        penalty_cap_enabled=cap_enabled,
        penalty_cap=Decimal(cap),
    )


def test_submission_at_due_date_is_on_time():
    result = compute_penalty(DUE, DUE, make_policy(), raw_grade=8, grade_max=10)
    assert result.days_late == 0
    assert result.penalty_percent == 0
    assert result.adjusted_grade == 8
    assert not result.is_late


def test_early_submission_has_no_penalty():
    result = compute_penalty(DUE, DUE - 3 * DAY, make_policy(), raw_grade=8, grade_max=10)
    assert result.penalty_percent == 0


@pytest.mark.parametrize(
    "seconds_late, expected_days",
    [
        (1, 1),
        (DAY - 1, 1),
        (DAY, 1),
        (DAY + 1, 2),
        (15 * DAY, 15),
    ],
)
def test_days_late_rounds_up(seconds_late, expected_days):
    assert days_late(DUE, DUE + seconds_late) == expected_days


def test_one_second_late_costs_a_full_day():
    result = compute_penalty(DUE, DUE + 1, make_policy(), raw_grade=8, grade_max=10)
    assert result.days_late == 1
    assert result.penalty_percent == 10
    assert result.adjusted_grade == pytest.approx(7.0)


def test_explicit_cap_limits_penalty():
    policy = make_policy(rate="10", cap_enabled=True, cap="40")
    result = compute_penalty(DUE, DUE + 15 * DAY, policy, raw_grade=10, grade_max=10)
    assert result.penalty_percent == Decimal("40")
    assert result.adjusted_grade == pytest.approx(6.0)


def test_without_cap_penalty_stops_at_100_percent():
    result = compute_penalty(DUE, DUE + 15 * DAY, make_policy(rate="10"), raw_grade=10, grade_max=10)
    assert result.penalty_percent == Decimal("100")
    assert result.adjusted_grade == 0


def test_enabled_cap_of_zero_falls_back_to_100():
    policy = make_policy(cap_enabled=True, cap="0")
    assert effective_cap(policy) == 100


def test_disabled_cap_is_ignored():
    policy = make_policy(cap_enabled=False, cap="25")
    assert effective_cap(policy) == 100


def test_adjusted_grade_never_negative():
    # 80% of a 10 point quiz is 8 points off a raw grade of 5
    policy = make_policy(rate="80")
    result = compute_penalty(DUE, DUE + 60, policy, raw_grade=5, grade_max=10)
    assert result.penalty_amount == pytest.approx(8.0)
    assert result.adjusted_grade == 0


def test_penalty_is_a_share_of_grade_max_not_raw_grade():
    result = compute_penalty(DUE, DUE + 2 * DAY, make_policy(rate="10"), raw_grade=50, grade_max=100)
    assert result.penalty_amount == pytest.approx(20.0)
    assert result.adjusted_grade == pytest.approx(30.0)


def test_fractional_rate_keeps_two_decimals():
    result = compute_penalty(DUE, DUE + 3 * DAY, make_policy(rate="2.35"), raw_grade=10, grade_max=10)
    assert result.penalty_percent == Decimal("7.05")
    assert str(result.penalty_percent) == "7.05"


def test_missing_raw_grade_counts_as_zero():
    result = compute_penalty(DUE, DUE + DAY, make_policy(), raw_grade=None, grade_max=10)
    assert result.adjusted_grade == 0


@pytest.mark.parametrize(
    "policy, expected",
    [
        (None, False),
        (make_policy(), True),
        (make_policy(enabled=False), False),
        (make_policy(due_date=0), False),
        # cap without penalty is an impossible state: inactive, not an error
        (make_policy(enabled=False, cap_enabled=True, cap="40"), False),
    ],
)
def test_penalty_active(policy, expected):
    assert penalty_active(policy) is expected
