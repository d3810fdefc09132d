"""Ownership history router"""
from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, List, Optional
from datetime import date, datetime
import logging

from app.database import get_db
from app.models.broker import Broker
from app.routers.auth import get_current_broker
from app.services.activity_log import ActivityLogger, get_activity_logger
from app.services.ownership import OwnershipService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Owners"])


# Request/Response Models
class OwnerFields(BaseModel):
    """Writable owner fields; unknown keys are ignored and blank strings dropped"""
    owner_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=30)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current_owner: Optional[bool] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v != ""}
        return data

    @field_validator("owner_name", "is_current_owner")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class OwnerCreate(OwnerFields):
    owner_name: str = Field(..., min_length=1, max_length=255)


class OwnerUpdate(OwnerFields):
    pass


class OwnerSummary(BaseModel):
    """Owner as nested in property listings"""
    id: int
    owner_name: str
    phone_number: Optional[str]
    is_current_owner: bool

    model_config = ConfigDict(from_attributes=True)


class OwnerResponse(OwnerSummary):
    property_id: int
    start_date: Optional[date]
    end_date: Optional[date]
    notes: Optional[str]
    created_at: datetime


# Endpoints
@router.get("/{property_id}/owners", response_model=List[OwnerResponse])
async def list_owners(
    property_id: int,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db)
):
    """Ownership history of a property"""
    owners = await OwnershipService(db, current_broker.id).list_owners(property_id)
    return [OwnerResponse.model_validate(o) for o in owners]


@router.post("/{property_id}/owners", response_model=OwnerResponse, status_code=status.HTTP_201_CREATED)
async def add_owner(
    property_id: int,
    request: OwnerCreate,
    background_tasks: BackgroundTasks,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger)
):
    """Add an owner to a property's history"""
    broker_id = current_broker.id
    owner = await OwnershipService(db, broker_id).add_owner(
        property_id, request.model_dump(exclude_unset=True)
    )

    background_tasks.add_task(activity_logger.log_owner_added, property_id, broker_id, owner.owner_name)

    return OwnerResponse.model_validate(owner)


@router.put("/owners/{owner_id}", response_model=OwnerResponse)
async def update_owner(
    owner_id: int,
    request: OwnerUpdate,
    background_tasks: BackgroundTasks,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger)
):
    """Update an owner record"""
    broker_id = current_broker.id
    fields = request.model_dump(exclude_unset=True)
    owner, before = await OwnershipService(db, broker_id).update_owner(owner_id, fields)

    background_tasks.add_task(
        activity_logger.log_owner_updated, owner.property_id, broker_id, before, fields
    )

    return OwnerResponse.model_validate(owner)


@router.delete("/owners/{owner_id}")
async def delete_owner(
    owner_id: int,
    background_tasks: BackgroundTasks,
    current_broker: Broker = Depends(get_current_broker),
    db: AsyncSession = Depends(get_db),
    activity_logger: ActivityLogger = Depends(get_activity_logger)
):
    """Remove an owner record"""
    broker_id = current_broker.id
    owner = await OwnershipService(db, broker_id).delete_owner(owner_id)

    background_tasks.add_task(
        activity_logger.log_owner_removed, owner.property_id, broker_id, owner.owner_name
    )

    return {"message": "Owner deleted successfully."}
