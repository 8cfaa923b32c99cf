# smartqr/routers/uploads.py
import json
import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..core.classifier import DataType
from ..core.db import SessionLocal, get_db
from ..schemas.qr import CloudFileResponse
from ..services.history import (
    delete_cloud_file,
    list_cloud_files,
    record_generation,
    save_cloud_file,
    storage_used_mb,
)
from ..services.uploader import LocalFile, SuccessEvent, UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Cloud Uploads"])


def get_orchestrator() -> UploadOrchestrator:
    return UploadOrchestrator()


def _persist_upload(local: LocalFile, event: SuccessEvent) -> None:
    with SessionLocal() as db:
        save_cloud_file(db, local.name, local.size, event.url, event.public_id, local.content_type)
        record_generation(db, event.url, DataType.FILE)


@router.post("")
async def upload_file(
    file: UploadFile = File(...),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
):
    """
    Upload a file to the CDN and stream the outcome as NDJSON:
    ``loading`` events with a progress percent, then one ``success`` or
    ``error`` line. Oversized files are refused with 413 before any upload.
    """
    if file.size is not None:
        orchestrator.validate(LocalFile(name=file.filename or "upload", size=file.size, stream=file.file))

    data = await file.read()
    local = LocalFile.from_bytes(file.filename or "upload", data, content_type=file.content_type)
    events = orchestrator.events(local)

    async def ndjson():
        async for event in events:
            if isinstance(event, SuccessEvent):
                try:
                    await run_in_threadpool(_persist_upload, local, event)
                except Exception:
                    # the file is already on the CDN; the client still gets its result
                    logger.exception("[UPLOAD] could not record %s", local.name)
            yield json.dumps(event.to_dict()) + "\n"

    return StreamingResponse(ndjson(), media_type="application/x-ndjson")


@router.get("/files", response_model=list[CloudFileResponse])
def get_files(db: Session = Depends(get_db)):
    return list_cloud_files(db)


@router.delete("/files/{file_id}")
def remove_file(file_id: int, db: Session = Depends(get_db)):
    if not delete_cloud_file(db, file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return {"deleted": file_id}


@router.get("/usage")
def usage(db: Session = Depends(get_db)):
    return {"files": len(list_cloud_files(db)), "storage_used_mb": round(storage_used_mb(db), 2)}
