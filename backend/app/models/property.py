"""Property listing model"""
from sqlalchemy import Column, Integer, String, DateTime, Text, Float, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from app.database import Base
import enum


class PropertyType(str, enum.Enum):
    """Classification of a listing"""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    PLOT = "plot"
    AGRICULTURE = "agriculture"


class PropertyStatus(str, enum.Enum):
    """Lifecycle status of a listing"""
    AVAILABLE = "available"
    SOLD = "sold"
    RENTED = "rented"


class FurnishedStatus(str, enum.Enum):
    """Furnish state for residential listings"""
    FURNISHED = "furnished"
    SEMI_FURNISHED = "semi-furnished"
    UNFURNISHED = "unfurnished"


class Property(Base):
    """A listing owned by exactly one broker"""
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    broker_id = Column(Integer, ForeignKey("brokers.id"), nullable=False, index=True)

    # Classification
    property_type = Column(Enum(PropertyType), nullable=False)
    status = Column(Enum(PropertyStatus), default=PropertyStatus.AVAILABLE, nullable=False)

    # Location
    city = Column(String(100), nullable=True)
    area = Column(String(150), nullable=True)
    locality = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)

    # Pricing (INR)
    total_price = Column(Float, nullable=True)
    price_per_sqft = Column(Float, nullable=True)

    # Dimensions (sq.ft)
    plot_area = Column(Float, nullable=True)
    built_up_area = Column(Float, nullable=True)
    carpet_area = Column(Float, nullable=True)

    # Residential
    bhk = Column(Integer, nullable=True)
    furnished_status = Column(Enum(FurnishedStatus), nullable=True)
    floor_number = Column(Integer, nullable=True)
    total_floors = Column(Integer, nullable=True)

    # Plot / agriculture
    survey_no = Column(String(100), nullable=True)

    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    broker = relationship("Broker", back_populates="properties")
    owners = relationship(
        "PropertyOwner",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyOwner.id",
    )
    logs = relationship("PropertyLog", back_populates="property", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_property_broker_created", "broker_id", "created_at"),
    )
