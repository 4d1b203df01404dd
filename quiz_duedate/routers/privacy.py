from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quiz_duedate.core.deps import get_db
from quiz_duedate.schemas.privacy import OverrideExportRow, PrivacyDeleteResult
from quiz_duedate.services import privacy

router = APIRouter(prefix="/privacy")


@router.get("/users/{user_id}", response_model=list[OverrideExportRow])
def export_user_data(user_id: int, db: Session = Depends(get_db)):
    return privacy.export_user_data(db, user_id)


@router.delete("/users/{user_id}", response_model=PrivacyDeleteResult)
def delete_user_data(
    user_id: int,
    quiz_id: Optional[list[int]] = Query(default=None),
    db: Session = Depends(get_db),
):
    try:
        deleted = privacy.delete_data_for_user(db, user_id, quiz_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return {"user_id": user_id, "deleted": deleted}
