from pydantic import BaseModel


class OverrideExportRow(BaseModel):
    quiz_id: int
    due_date: int
    due_date_display: str
    last_modified: int


class PrivacyDeleteResult(BaseModel):
    user_id: int
    deleted: int
