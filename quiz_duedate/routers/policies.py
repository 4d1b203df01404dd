import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quiz_duedate.core.deps import get_db
from quiz_duedate.core.errors import to_http_exception
from quiz_duedate.core.exceptions import DueDateError
from quiz_duedate.models.quiz import Quiz
from quiz_duedate.schemas.penalty import PenaltyPreview, PenaltyPreviewRequest
from quiz_duedate.schemas.policy import DueDateInfo, EffectiveDueDate, PolicyRead, PolicyWrite
from quiz_duedate.services import rule, settings
from quiz_duedate.services.penalty import compute_penalty, penalty_active
from quiz_duedate.services.resolver import resolve
from quiz_duedate.services.stores import PolicyStore

router = APIRouter()


def _ensure_quiz_exists(db: Session, quiz_id: int) -> Quiz:
    quiz = db.get(Quiz, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.get("/quizzes/{quiz_id}/duedate", response_model=PolicyRead)
def get_policy(quiz_id: int, db: Session = Depends(get_db)):
    _ensure_quiz_exists(db, quiz_id)
    policy = PolicyStore(db).get_policy(quiz_id)
    if not policy:
        raise HTTPException(status_code=404, detail="No due date settings for this quiz")
    return policy


@router.put("/quizzes/{quiz_id}/duedate", response_model=Optional[PolicyRead])
def put_policy(quiz_id: int, payload: PolicyWrite, db: Session = Depends(get_db)):
    quiz = _ensure_quiz_exists(db, quiz_id)

    try:
        policy = settings.save_settings(db, quiz, payload)
        db.commit()
    except DueDateError as exc:
        db.rollback()
        raise to_http_exception(exc)
    except Exception:
        db.rollback()
        raise

    if policy is not None:
        db.refresh(policy)
    return policy


@router.delete("/quizzes/{quiz_id}/duedate", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy(quiz_id: int, db: Session = Depends(get_db)):
    quiz = _ensure_quiz_exists(db, quiz_id)

    try:
        settings.delete_settings(db, quiz)
        db.commit()
    except Exception:
        db.rollback()
        raise


@router.get("/quizzes/{quiz_id}/duedate/info", response_model=DueDateInfo)
def due_date_info(quiz_id: int, user_id: Optional[int] = None, db: Session = Depends(get_db)):
    _ensure_quiz_exists(db, quiz_id)
    policy = PolicyStore(db).get_policy(quiz_id)

    effective = resolve(db, quiz_id, user_id) if user_id is not None else None
    if effective is None and policy is not None and policy.due_date:
        effective = policy.due_date

    return DueDateInfo(
        quiz_id=quiz_id,
        user_id=user_id,
        effective_due_date=effective,
        messages=rule.evaluate(policy, int(time.time()), effective),
    )


@router.get("/quizzes/{quiz_id}/duedate/effective/{user_id}", response_model=EffectiveDueDate)
def effective_due_date(quiz_id: int, user_id: int, db: Session = Depends(get_db)):
    _ensure_quiz_exists(db, quiz_id)
    return EffectiveDueDate(
        quiz_id=quiz_id, user_id=user_id, effective_due_date=resolve(db, quiz_id, user_id)
    )


@router.post("/quizzes/{quiz_id}/duedate/penalty", response_model=PenaltyPreview)
def preview_penalty(quiz_id: int, payload: PenaltyPreviewRequest, db: Session = Depends(get_db)):
    quiz = _ensure_quiz_exists(db, quiz_id)
    policy = PolicyStore(db).get_policy(quiz_id)
    due = resolve(db, quiz_id, payload.user_id)

    # nothing to deduct without an active penalty and a due date
    if not penalty_active(policy) or due is None:
        return PenaltyPreview(
            quiz_id=quiz_id,
            user_id=payload.user_id,
            effective_due_date=due,
            penalty_active=False,
            adjusted_grade=payload.raw_grade,
        )

    result = compute_penalty(due, payload.submission_time, policy, payload.raw_grade, quiz.grade_max)
    return PenaltyPreview(
        quiz_id=quiz_id,
        user_id=payload.user_id,
        effective_due_date=due,
        penalty_active=True,
        days_late=result.days_late,
        penalty_percent=float(result.penalty_percent),
        penalty_amount=result.penalty_amount,
        adjusted_grade=result.adjusted_grade,
    )
