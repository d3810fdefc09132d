"""Activity log model for property and owner changes"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base
import enum


class LogAction(str, enum.Enum):
    """Kinds of activity recorded on a property"""
    CREATED = "created"
    UPDATED = "updated"
    OWNER_ADDED = "owner_added"
    OWNER_UPDATED = "owner_updated"
    OWNER_REMOVED = "owner_removed"


class PropertyLog(Base):
    """Append-only activity entry; removed only together with its property"""
    __tablename__ = "property_logs"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    broker_id = Column(Integer, ForeignKey("brokers.id"), nullable=False, index=True)

    action = Column(Enum(LogAction), nullable=False)

    # Field-level change (updates only)
    field_name = Column(String(100), nullable=True)
    old_value = Column(Text, nullable=True)
    new_value = Column(Text, nullable=True)

    description = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    property = relationship("Property", back_populates="logs")
