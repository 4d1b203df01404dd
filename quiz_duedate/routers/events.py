from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from quiz_duedate.core.deps import get_event_context
from quiz_duedate.models.quiz import Quiz
from quiz_duedate.models.quiz_attempt import QuizAttempt
from quiz_duedate.schemas.events import (
    AttemptSubmittedEvent,
    GradeRead,
    QuizSavedEvent,
    UserGradedEvent,
)
from quiz_duedate.services.events import (
    ATTEMPT_SUBMITTED,
    QUIZ_SAVED,
    USER_GRADED,
    EventContext,
)
from quiz_duedate.services.grades import GradeSink, best_raw_grade, finished_attempts

router = APIRouter(prefix="/events")


def _ensure_quiz_exists(ctx: EventContext, quiz_id: int) -> Quiz:
    quiz = ctx.db.get(Quiz, quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


@router.post("/attempt-submitted", response_model=Optional[GradeRead])
def attempt_submitted(
    payload: AttemptSubmittedEvent,
    ctx: EventContext = Depends(get_event_context),
):
    quiz = _ensure_quiz_exists(ctx, payload.quiz_id)
    db = ctx.db

    attempt = db.get(QuizAttempt, payload.attempt_id)
    if attempt is None:
        attempt = QuizAttempt(id=payload.attempt_id, quiz_id=quiz.id, user_id=payload.user_id)
        db.add(attempt)
    elif attempt.quiz_id != quiz.id or attempt.user_id != payload.user_id:
        raise HTTPException(status_code=409, detail="Attempt belongs to another quiz or user")

    attempt.time_finish = payload.time_finish
    attempt.raw_grade = payload.raw_grade

    try:
        db.flush()
        ctx.publish(ATTEMPT_SUBMITTED, attempt_id=attempt.id)

        # the quiz then pushes its grade for the attempt set
        grades = GradeSink(ctx)
        raw = best_raw_grade(finished_attempts(db, quiz.id, payload.user_id), quiz.grade_method)
        if raw is not None:
            grades.push_raw_grade(quiz.id, payload.user_id, raw)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return GradeSink(ctx).get(quiz.id, payload.user_id)


@router.post("/user-graded", response_model=Optional[GradeRead])
def user_graded(
    payload: UserGradedEvent,
    ctx: EventContext = Depends(get_event_context),
):
    _ensure_quiz_exists(ctx, payload.quiz_id)
    db = ctx.db

    try:
        if payload.raw_grade is not None:
            GradeSink(ctx).push_raw_grade(payload.quiz_id, payload.user_id, payload.raw_grade)
        else:
            ctx.publish(USER_GRADED, quiz_id=payload.quiz_id, user_id=payload.user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return GradeSink(ctx).get(payload.quiz_id, payload.user_id)


@router.post("/quiz-saved", status_code=status.HTTP_204_NO_CONTENT)
def quiz_saved(
    payload: QuizSavedEvent,
    ctx: EventContext = Depends(get_event_context),
):
    _ensure_quiz_exists(ctx, payload.quiz_id)

    try:
        ctx.publish(QUIZ_SAVED, quiz_id=payload.quiz_id)
        ctx.db.commit()
    except Exception:
        ctx.db.rollback()
        raise
