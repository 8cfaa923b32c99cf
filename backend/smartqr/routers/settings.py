from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from ..core.db import get_db
from ..schemas.qr import ThemeResponse, ThemeUpdate
from ..services.preferences import ThemeStore, resolve_effective_mode

router = APIRouter(prefix="/settings", tags=["Settings"])


def prefers_dark(sec_ch_prefers_color_scheme: Optional[str] = Header(None)) -> bool:
    """System theme hint sent by the browser (``Sec-CH-Prefers-Color-Scheme``)."""
    return (sec_ch_prefers_color_scheme or "").strip('" ').lower() == "dark"


@router.get("/theme", response_model=ThemeResponse)
def get_theme(db: Session = Depends(get_db), dark: bool = Depends(prefers_dark)):
    appearance = ThemeStore(db).appearance(dark)
    return ThemeResponse(mode=appearance.mode, effective=appearance.effective)


@router.put("/theme", response_model=ThemeResponse)
def set_theme(body: ThemeUpdate, db: Session = Depends(get_db), dark: bool = Depends(prefers_dark)):
    mode = ThemeStore(db).save(body.mode)
    return ThemeResponse(mode=mode, effective=resolve_effective_mode(mode, dark))
