"""Services package"""
from app.services.auth import AuthService, get_password_hash, verify_password
from app.services.activity_log import ActivityLogger, get_activity_logger
from app.services.ownership import OwnershipService
from app.services.properties import PropertyService
from app.services.property_search import PropertySearchResolver, SearchFilters

__all__ = [
    "AuthService",
    "get_password_hash",
    "verify_password",
    "ActivityLogger",
    "get_activity_logger",
    "OwnershipService",
    "PropertyService",
    "PropertySearchResolver",
    "SearchFilters",
]
