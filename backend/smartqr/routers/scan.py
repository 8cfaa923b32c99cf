from fastapi import APIRouter, File, UploadFile
from fastapi.concurrency import run_in_threadpool

from ..core.classifier import classify
from ..schemas.qr import ScanResponse, ScanResult
from ..services.scanner import decode_image

router = APIRouter(prefix="/scan", tags=["QR Scanner"])


@router.post("/image", response_model=ScanResponse)
async def scan_image(file: UploadFile = File(...)):
    """Decode every QR code in an uploaded image and classify its text."""
    texts = await run_in_threadpool(decode_image, await file.read())
    results = []
    for text in texts:
        result = classify(text)
        results.append(ScanResult(text=text, type=result.type, label=result.type.label, formatted=result.formatted))
    return ScanResponse(found=bool(results), results=results)
