"""API routers package"""
from app.routers.auth import router as auth_router
from app.routers.owners import router as owners_router
from app.routers.properties import router as properties_router
from app.routers.locations import router as locations_router

__all__ = [
    "auth_router",
    "owners_router",
    "properties_router",
    "locations_router",
]
