from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime
from .db import Base

class StoreEntryDB(Base):
    """One key of the key-value store, holding a JSON document"""
    __tablename__ = "store_entries"
    
    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    schema_version = Column(Integer, nullable=False, default=1)
    
    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    def __repr__(self):
        return f"<StoreEntry(key={self.key}, version={self.schema_version})>"
