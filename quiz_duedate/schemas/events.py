from typing import Optional

from pydantic import BaseModel, Field


class AttemptSubmittedEvent(BaseModel):
    attempt_id: int
    quiz_id: int
    user_id: int
    time_finish: int = Field(gt=0)
    raw_grade: Optional[float] = None


class UserGradedEvent(BaseModel):
    quiz_id: int
    user_id: int
    raw_grade: Optional[float] = None


class QuizSavedEvent(BaseModel):
    quiz_id: int


class GradeRead(BaseModel):
    quiz_id: int
    user_id: int
    raw_grade: Optional[float] = None
    final_grade: Optional[float] = None
    feedback: Optional[str] = None
    overridden: bool
    source: Optional[str] = None

    class Config:
        from_attributes = True
