from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.classifier import classify, build_wifi_payload, detect
from ..core.db import get_db
from ..core.errors import EmptyPayloadError
from ..core.qr_utils import COLOR_PRESETS, render_qr, stream_png, qr_filename
from ..schemas.qr import ClassifyRequest, ClassifyResponse, GenerateRequest, ShareRequest, WiFiRequest
from ..services.history import record_generation
from ..services.share import build_share_payload

router = APIRouter(prefix="/qr", tags=["QR Generator"])


def _describe(raw: str) -> ClassifyResponse:
    result = classify(raw)
    return ClassifyResponse(type=result.type, label=result.type.label, formatted=result.formatted)


@router.post("/classify", response_model=ClassifyResponse)
def classify_input(body: ClassifyRequest):
    return _describe(body.input)


@router.post("/generate")
def generate_qr(body: GenerateRequest, db: Session = Depends(get_db)):
    """Classify, format and render the input as a PNG; remembers it in history."""
    result = classify(body.input)
    if not result.formatted:
        raise EmptyPayloadError()

    img = render_qr(
        result.formatted,
        size=body.size,
        foreground=body.foreground,
        background=body.background,
        use_logo=body.use_logo,
    )
    record_generation(db, result.formatted, result.type)
    headers = {"X-QR-Type": result.type.value, "X-QR-Payload": quote(result.formatted, safe=":/?=&,;@+")}
    return stream_png(img, headers=headers)


@router.get("/download")
def download_qr(input: str, foreground: str = "#000000", background: str = "#ffffff", use_logo: bool = True):
    result = classify(input)
    img = render_qr(result.formatted, foreground=foreground, background=background, use_logo=use_logo)
    return stream_png(img, filename=qr_filename())


@router.get("/presets")
def color_presets():
    return {"presets": COLOR_PRESETS}


@router.post("/wifi", response_model=ClassifyResponse)
def wifi_payload(body: WiFiRequest):
    try:
        payload = build_wifi_payload(body.ssid, body.password, body.encryption)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    data_type = detect(payload)
    return ClassifyResponse(type=data_type, label=data_type.label, formatted=payload)


@router.post("/share")
def share_qr(body: ShareRequest):
    return build_share_payload(classify(body.input).formatted, body.can_share_files)
