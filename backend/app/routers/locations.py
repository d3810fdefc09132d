"""Map link resolution router"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import Optional

from app.models.broker import Broker
from app.routers.auth import get_current_broker
from app.services.geo import extract_coordinates, resolve_map_url

router = APIRouter(tags=["Locations"])


class ResolvedLocation(BaseModel):
    url: str
    lat: Optional[float] = None
    lng: Optional[float] = None


@router.get("/resolve-url", response_model=ResolvedLocation)
async def resolve_url(
    url: str = Query(..., min_length=1),
    current_broker: Broker = Depends(get_current_broker)
):
    """Expand a shared maps link and extract its coordinates"""
    coordinates = extract_coordinates(url)
    final_url = url
    if coordinates is None:
        final_url = await resolve_map_url(url)
        coordinates = extract_coordinates(final_url)

    lat, lng = coordinates if coordinates else (None, None)
    return ResolvedLocation(url=final_url, lat=lat, lng=lng)
