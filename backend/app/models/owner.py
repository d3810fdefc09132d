"""Ownership history model"""
from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base


class PropertyOwner(Base):
    """One entry in a property's ownership timeline"""
    __tablename__ = "property_owners"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    broker_id = Column(Integer, ForeignKey("brokers.id"), nullable=False, index=True)

    owner_name = Column(String(255), nullable=False)
    phone_number = Column(String(30), nullable=True)

    # Validity window
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)

    # At most one per property; kept by app.services.ownership, not by a constraint
    is_current_owner = Column(Boolean, default=False, nullable=False)

    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    property = relationship("Property", back_populates="owners")

    __table_args__ = (
        Index("ix_owner_property_current", "property_id", "is_current_owner"),
    )
