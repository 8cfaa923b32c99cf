from sqlalchemy import Column, String, DateTime, func
from ..core.db import Base


class Preference(Base):
    __tablename__ = "preferences"

    key = Column(String(50), primary_key=True)
    value = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
