from fastapi import HTTPException, status

from quiz_duedate.core.exceptions import (
    DueDateError,
    NoDueDateConfiguredError,
    NotFoundError,
    OverrideConflictError,
    ValidationError,
)


def to_http_exception(exc: DueDateError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, OverrideConflictError):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={exc.field: str(exc)},
        )
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.errors)
    if isinstance(exc, NoDueDateConfiguredError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No due date is configured for this quiz",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
