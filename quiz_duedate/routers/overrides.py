from fastapi import APIRouter, Depends, HTTPException, status

from quiz_duedate.core.deps import get_event_context
from quiz_duedate.core.errors import to_http_exception
from quiz_duedate.core.exceptions import DueDateError
from quiz_duedate.models.quiz import Quiz
from quiz_duedate.schemas.override import OverrideCreate, OverrideRead, OverrideUpdate
from quiz_duedate.services.events import EventContext
from quiz_duedate.services.overrides import OverrideManager

router = APIRouter()


@router.get("/quizzes/{quiz_id}/overrides", response_model=list[OverrideRead])
def list_overrides(
    quiz_id: int,
    mode: str = "",
    ctx: EventContext = Depends(get_event_context),
):
    if not ctx.db.get(Quiz, quiz_id):
        raise HTTPException(status_code=404, detail="Quiz not found")

    try:
        return OverrideManager(ctx).list_overrides(quiz_id, mode)
    except DueDateError as exc:
        raise to_http_exception(exc)


@router.post(
    "/quizzes/{quiz_id}/overrides",
    response_model=OverrideRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"description": "An extension already exists for this user or group"},
    },
)
def create_override(
    quiz_id: int,
    payload: OverrideCreate,
    ctx: EventContext = Depends(get_event_context),
):
    db = ctx.db
    try:
        override = OverrideManager(ctx).save_override(
            quiz_id,
            payload.due_date,
            user_id=payload.user_id,
            group_id=payload.group_id,
        )
        db.commit()
    except DueDateError as exc:
        db.rollback()
        raise to_http_exception(exc)
    except Exception:
        db.rollback()
        raise

    db.refresh(override)
    return override


@router.put("/overrides/{override_id}", response_model=OverrideRead)
def update_override(
    override_id: int,
    payload: OverrideUpdate,
    ctx: EventContext = Depends(get_event_context),
):
    db = ctx.db
    manager = OverrideManager(ctx)
    try:
        existing = manager.get(override_id)
        override = manager.save_override(
            existing.quiz_id, payload.due_date, override_id=override_id
        )
        db.commit()
    except DueDateError as exc:
        db.rollback()
        raise to_http_exception(exc)
    except Exception:
        db.rollback()
        raise

    db.refresh(override)
    return override


@router.delete("/overrides/{override_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_override(
    override_id: int,
    ctx: EventContext = Depends(get_event_context),
):
    db = ctx.db
    try:
        OverrideManager(ctx).delete_override(override_id)
        db.commit()
    except DueDateError as exc:
        db.rollback()
        raise to_http_exception(exc)
    except Exception:
        db.rollback()
        raise
