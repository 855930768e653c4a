"""Key-value row backing the persistence layer."""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from .base import Base

class StorageItem(Base):
    """One string value stored under a string key."""

    __tablename__ = "storage_items"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<StorageItem(key='{self.key}', size={len(self.value or '')})>"
