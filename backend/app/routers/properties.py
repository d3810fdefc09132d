"""Property listings router"""
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, List, Optional
from datetime import datetime
import logging

from app.database import get_db
from app.models.broker import Broker
from app.models.property import PropertyType, PropertyStatus, FurnishedStatus
from app.models.property_log import LogAction
from app.routers.auth import get_current_broker
from app.routers.owners import OwnerResponse, OwnerSummary
from app.services.activity_log import ActivityLogger, get_activity_logger, snapshot
from app.services.properties import PropertyService, PROPERTY_FIELDS
from app.services.property_search import PropertySearchResolver, SearchFilters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])


# Request/Response Models
class PropertyFields(BaseModel):
    """Writable listing fields; unknown keys are ignored and blank strings dropped"""
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None

    city: Optional[str] = Field(None, max_length=100)
    area: Optional[str] = Field(None, max_length=150)
    locality: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    total_price: Optional[float] = Field(None, ge=0)
    price_per_sqft: Optional[float] = Field(None, ge=0)

    plot_area: Optional[float] = Field(None, ge=0)
    built_up_area: Optional[float] = Field(None, ge=0)
    carpet_area: Optional[float] = Field(None, ge=0)

    bhk: Optional[int] = Field(None, ge=0)
    furnished_status: Optional[FurnishedStatus] = None
    floor_number: Optional[int] = None
    total_floors: Optional[int] = Field(None, ge=0)

    survey_no: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v != ""}
        return data

    @field_validator("property_type", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class PropertyCreate(PropertyFields):
    property_type: PropertyType


class PropertyUpdate(PropertyFields):
    pass


class PropertyResponse(BaseModel):
    """Listing with a summary of its owners"""
    id: int
    property_type: PropertyType
    status: PropertyStatus
    city: Optional[str]
    area: Optional[str]
    locality: Optional[str]
    address: Optional[str]
    lat: Optional[float]
    lng: Optional[float]
    total_price: Optional[float]
    price_per_sqft: Optional[float]
    plot_area: Optional[float]
    built_up_area: Optional[float]
    carpet_area: Optional[float]
    bhk: Optional[int]
    furnished_status: Optional[FurnishedStatus]
    floor_number: Optional[int]
    total_floors: Optional[int]
    survey_no: Optional[str]
    notes: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    owners: List[OwnerSummary] = []

    model_config = ConfigDict(from_attributes=True)


class PropertyDetailResponse(PropertyResponse):
    """Listing with full ownership records"""
    owners: List[OwnerResponse] = []


class LogResponse(BaseModel):
    id: int
    property_id: int
    action: LogAction
    field_name: Optional[str]
    old_value: Optional[str]
    new_value: Optional[str]
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Endpoints
@router.get("", response_model=List[PropertyResponse])
async def list_properties(
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """All listings of the logged-in broker, newest first"""
    properties = await PropertyService(db, current_broker.id).list_properties()
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get("/search", response_model=List[PropertyResponse])
async def search_properties(
    q: Optional[str] = Query(None, description="Free text across location, survey no, notes and owners"),
    property_type: Optional[PropertyType] = Query(None, alias="type"),
    status_filter: Optional[PropertyStatus] = Query(None, alias="status"),
    area: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    bhk: Optional[int] = Query(None, ge=0),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    furnished: Optional[FurnishedStatus] = Query(None),
    survey_no: Optional[str] = Query(None),
    owner_name: Optional[str] = Query(None, description="Owner name or phone"),
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """Search the broker's listings"""
    filters = SearchFilters(
        q=q,
        property_type=property_type,
        status=status_filter,
        bhk=bhk,
        furnished_status=furnished,
        min_price=min_price,
        max_price=max_price,
        area=area,
        city=city,
        survey_no=survey_no,
        owner_name=owner_name,
    )
    results = await PropertySearchResolver(db, current_broker.id).search(filters)
    return [PropertyResponse.model_validate(p) for p in results]


@router.get("/{property_id}/logs", response_model=List[LogResponse])
async def list_property_logs(
    property_id: int,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """Activity timeline for a listing"""
    logs = await PropertyService(db, current_broker.id).list_logs(property_id)
    return [LogResponse.model_validate(entry) for entry in logs]


@router.get("/{property_id}", response_model=PropertyDetailResponse)
async def get_property(
    property_id: int,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """Get a single listing with its ownership records"""
    prop = await PropertyService(db, current_broker.id).get_property(property_id)
    return PropertyDetailResponse.model_validate(prop)


@router.post("", response_model=PropertyDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    request: PropertyCreate,
    background_tasks: BackgroundTasks,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger)
):
    """Create a listing"""
    broker_id = current_broker.id
    prop = await PropertyService(db, broker_id).create_property(request.model_dump(exclude_unset=True))

    background_tasks.add_task(
        activity_logger.log_property_created, prop.id, broker_id, snapshot(prop, PROPERTY_FIELDS)
    )

    return PropertyDetailResponse.model_validate(prop)


@router.put("/{property_id}", response_model=PropertyDetailResponse)
async def update_property(
    property_id: int,
    request: PropertyUpdate,
    background_tasks: BackgroundTasks,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger)
):
    """Update a listing; only supplied fields change"""
    broker_id = current_broker.id
    fields = request.model_dump(exclude_unset=True)
    prop, before = await PropertyService(db, broker_id).update_property(property_id, fields)

    background_tasks.add_task(activity_logger.log_property_updated, prop.id, broker_id, before, fields)

    return PropertyDetailResponse.model_validate(prop)


@router.delete("/{property_id}")
async def delete_property(
    property_id: int,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """Delete a listing with its owners and activity log"""
    await PropertyService(db, current_broker.id).delete_property(property_id)
    return {"message": "Property deleted successfully."}
