"""
Late submission penalty math.

Pure functions over a policy and two timestamps. Percentages are kept as
``Decimal`` with two places, matching the Numeric(12, 2) columns they come
from. Grades are plain floats, as the gradebook stores them.
"""
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from quiz_duedate.core.config import DEFAULT_PENALTY_CAP, SECONDS_PER_DAY

TWO_PLACES = Decimal("0.01")


class PenaltyPolicy(Protocol):
    due_date: int
    penalty_enabled: bool
    penalty_rate: Decimal
    penalty_cap_enabled: bool
    penalty_cap: Decimal


@dataclass(frozen=True)
class PenaltyResult:
    days_late: int
    penalty_percent: Decimal
    penalty_amount: float
    adjusted_grade: float

    @property
    def is_late(self) -> bool:
        return self.days_late > 0


def _as_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def penalty_active(policy: PenaltyPolicy | None) -> bool:
    """True only for a policy that can actually penalise a submission.

    Impossible combinations (penalty without a due date) are treated as
    inactive instead of raising.
    """
    if policy is None:
        return False
    return bool(policy.penalty_enabled) and bool(policy.due_date)


def effective_cap(policy: PenaltyPolicy) -> Decimal:
    cap = _as_decimal(policy.penalty_cap)
    if policy.penalty_cap_enabled and cap > 0:
        return cap
    return Decimal(DEFAULT_PENALTY_CAP)


def days_late(effective_due_date: int, submission_time: int) -> int:
    # any fraction of a day counts as a full day
    if submission_time <= effective_due_date:
        return 0
    return math.ceil((submission_time - effective_due_date) / SECONDS_PER_DAY)


def penalty_percent(effective_due_date: int, submission_time: int, policy: PenaltyPolicy) -> Decimal:
    days = days_late(effective_due_date, submission_time)
    if days == 0:
        return Decimal("0.00")

    raw = days * _as_decimal(policy.penalty_rate)
    return min(raw, effective_cap(policy)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def compute_penalty(
    effective_due_date: int,
    submission_time: int,
    policy: PenaltyPolicy,
    raw_grade: float,
    grade_max: float,
) -> PenaltyResult:
    """
    Returns the penalty for a submission made at ``submission_time``.

    The caller must check ``penalty_active(policy)`` first; a quiz with no due
    date has no penalty question to answer at all.
    """
    days = days_late(effective_due_date, submission_time)
    percent = penalty_percent(effective_due_date, submission_time, policy)

    amount = float(percent) / 100 * float(grade_max)
    adjusted = max(0.0, float(raw_grade or 0) - amount)

    return PenaltyResult(
        days_late=days,
        penalty_percent=percent,
        penalty_amount=amount,
        adjusted_grade=adjusted,
    )
