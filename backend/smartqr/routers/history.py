from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..schemas.qr import HistoryItem
from ..services.history import clear_history, list_history

router = APIRouter(prefix="/history", tags=["History"])


@router.get("", response_model=list[HistoryItem])
def get_history(db: Session = Depends(get_db)):
    return list_history(db)


@router.delete("")
def delete_history(db: Session = Depends(get_db)):
    return {"deleted": clear_history(db)}
