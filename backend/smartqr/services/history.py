# smartqr/services/history.py
"""Generation history and uploaded cloud file records."""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.classifier import DataType
from ..core.config import settings
from ..models.cloud_file import CloudFile
from ..models.history import QRHistory

logger = logging.getLogger(__name__)


# -----------------------------------------------------
# 🔹 Recent payloads
# -----------------------------------------------------
def record_generation(db: Session, content: str, data_type: DataType, limit: Optional[int] = None) -> Optional[QRHistory]:
    """Store a generated payload and prune to the newest ``limit`` rows."""
    if not content:
        return None
    limit = limit or settings.HISTORY_LIMIT

    entry = QRHistory(content=content, data_type=DataType(data_type).value)
    db.add(entry)
    db.flush()

    stale = (
        db.query(QRHistory.id)
        .order_by(QRHistory.id.desc())
        .offset(limit)
        .all()
    )
    if stale:
        db.query(QRHistory).filter(QRHistory.id.in_([row.id for row in stale])).delete(synchronize_session=False)
    db.commit()
    db.refresh(entry)
    return entry


def list_history(db: Session) -> List[QRHistory]:
    return db.query(QRHistory).order_by(QRHistory.id.desc()).all()


def clear_history(db: Session) -> int:
    removed = db.query(QRHistory).delete()
    db.commit()
    logger.info("[HISTORY CLEARED] %d entries", removed)
    return removed


# -----------------------------------------------------
# 🔹 Cloud files
# -----------------------------------------------------
def save_cloud_file(
    db: Session,
    name: str,
    size: int,
    url: str,
    public_id: str = "",
    content_type: Optional[str] = None,
) -> CloudFile:
    record = CloudFile(name=name, size=size, url=url, public_id=public_id, content_type=content_type)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("[CLOUD FILE SAVED] %s → %s", name, url)
    return record


def list_cloud_files(db: Session) -> List[CloudFile]:
    return db.query(CloudFile).order_by(CloudFile.id.desc()).all()


def delete_cloud_file(db: Session, file_id: int) -> bool:
    # Only the record goes; removing the CDN asset needs the signed admin API.
    record = db.query(CloudFile).filter(CloudFile.id == file_id).first()
    if not record:
        return False
    db.delete(record)
    db.commit()
    return True


def storage_used_mb(db: Session) -> float:
    total = db.query(func.coalesce(func.sum(CloudFile.size), 0)).scalar()
    return float(total or 0) / (1024 * 1024)
