# smartqr/models/cloud_file.py
from sqlalchemy import Column, Integer, BigInteger, String, DateTime
from sqlalchemy.sql import func
from ..core.db import Base


class CloudFile(Base):
    __tablename__ = "cloud_files"

    id = Column(Integer, primary_key=True, index=True)

    # --- File details ---
    name = Column(String(255), nullable=False)
    size = Column(BigInteger, nullable=False, default=0)  # bytes
    content_type = Column(String(100), nullable=True)

    # --- CDN location ---
    url = Column(String(1024), nullable=False)
    public_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def summary(self):
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "content_type": self.content_type,
            "url": self.url,
            "public_id": self.public_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<CloudFile(id={self.id}, name='{self.name}', size={self.size})>"
