from typing import Optional

from pydantic import BaseModel, Field, model_validator


class OverrideCreate(BaseModel):
    user_id: Optional[int] = Field(default=None, gt=0)
    group_id: Optional[int] = Field(default=None, gt=0)
    due_date: int = Field(gt=0)

    @model_validator(mode="after")
    def check_single_scope(self):
        if (self.user_id is None) == (self.group_id is None):
            raise ValueError("exactly one of user_id or group_id is required")
        return self


class OverrideUpdate(BaseModel):
    due_date: int = Field(gt=0)


class OverrideRead(BaseModel):
    id: int
    quiz_id: int
    user_id: Optional[int] = None
    group_id: Optional[int] = None
    due_date: int
    last_modified: int

    class Config:
        from_attributes = True
