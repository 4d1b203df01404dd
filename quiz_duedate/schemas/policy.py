from decimal import Decimal

from pydantic import BaseModel, Field


class PolicyWrite(BaseModel):
    due_date: int = Field(default=0, ge=0)
    penalty_enabled: bool = False
    penalty_rate: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    penalty_cap_enabled: bool = False
    penalty_cap: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)


class PolicyRead(BaseModel):
    id: int
    quiz_id: int
    due_date: int
    penalty_enabled: bool
    penalty_rate: float
    penalty_cap_enabled: bool
    penalty_cap: float

    class Config:
        from_attributes = True


class DueDateInfo(BaseModel):
    quiz_id: int
    user_id: int | None = None
    effective_due_date: int | None = None
    messages: list[str]


class EffectiveDueDate(BaseModel):
    quiz_id: int
    user_id: int
    effective_due_date: int | None = None
