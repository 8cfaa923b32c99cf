# smartqr/models/history.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from ..core.db import Base


class QRHistory(Base):
    __tablename__ = "qr_history"

    id = Column(Integer, primary_key=True, index=True)

    # Exact payload handed to the encoder
    content = Column(Text, nullable=False)
    data_type = Column(String(20), nullable=False, default="text")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def summary(self):
        return {
            "id": self.id,
            "content": self.content,
            "data_type": self.data_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<QRHistory(id={self.id}, type='{self.data_type}', content='{self.content[:40]}')>"
