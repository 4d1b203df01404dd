from typing import Optional

from pydantic import BaseModel, Field


class PenaltyPreviewRequest(BaseModel):
    user_id: int
    submission_time: int = Field(ge=0)
    raw_grade: float = Field(ge=0)


class PenaltyPreview(BaseModel):
    quiz_id: int
    user_id: int
    effective_due_date: Optional[int] = None
    penalty_active: bool
    days_late: int = 0
    penalty_percent: float = 0.0
    penalty_amount: float = 0.0
    adjusted_grade: float
