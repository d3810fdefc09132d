"""Database models package"""
from app.models.broker import Broker
from app.models.property import Property, PropertyType, PropertyStatus, FurnishedStatus
from app.models.owner import PropertyOwner
from app.models.property_log import PropertyLog, LogAction

__all__ = [
    "Broker",
    "Property",
    "PropertyType",
    "PropertyStatus",
    "FurnishedStatus",
    "PropertyOwner",
    "PropertyLog",
    "LogAction",
]
