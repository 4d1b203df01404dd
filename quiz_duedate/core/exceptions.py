class DueDateError(Exception):
    """Base class for errors raised by the due date service layer."""


class NotFoundError(DueDateError):
    pass


class ValidationError(DueDateError):
    """Rejected input. ``errors`` maps field names to messages."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))


class OverrideConflictError(DueDateError):
    def __init__(self, field: str, message: str = "An extension already exists for this selection."):
        self.field = field
        super().__init__(message)


class NoDueDateConfiguredError(DueDateError):
    def __init__(self, quiz_id: int):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz {quiz_id} has no due date configured")
