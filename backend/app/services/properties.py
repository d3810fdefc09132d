"""Property listing service"""
import logging
from typing import Any, Dict, List, Tuple

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import commit_or_raise
from app.exceptions import NotFoundError
from app.models.owner import PropertyOwner
from app.models.property import Property
from app.models.property_log import PropertyLog
from app.services.activity_log import FIELD_LABELS, snapshot

logger = logging.getLogger(__name__)

# Writable property fields; identical to the fields the activity log tracks
PROPERTY_FIELDS = tuple(FIELD_LABELS)


class PropertyService:
    """CRUD over one broker's listings"""

    def __init__(self, db: AsyncSession, broker_id: int):
        self.db = db
        self.broker_id = broker_id

    def _scoped(self):
        return (
            select(Property)
            .options(selectinload(Property.owners))
            .where(Property.broker_id == self.broker_id)
        )

    async def list_properties(self) -> List[Property]:
        """All listings of the broker, newest first"""
        result = await self.db.execute(
            self._scoped().order_by(Property.created_at.desc(), Property.id.desc())
        )
        return list(result.scalars().all())

    async def get_property(self, property_id: int) -> Property:
        result = await self.db.execute(
            self._scoped()
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )
        prop = result.scalar_one_or_none()
        if not prop:
            raise NotFoundError(message="Property not found.")
        return prop

    async def create_property(self, fields: Dict[str, Any]) -> Property:
        prop = Property(**fields, broker_id=self.broker_id)
        self.db.add(prop)
        await commit_or_raise(self.db, "Failed to create property.")

        logger.info(f"Broker {self.broker_id} created property {prop.id}")
        return await self.get_property(prop.id)

    async def update_property(self, property_id: int, fields: Dict[str, Any]) -> Tuple[Property, Dict[str, Any]]:
        """Apply ``fields``; returns the updated listing and its prior state"""
        prop = await self.get_property(property_id)
        before = snapshot(prop, PROPERTY_FIELDS)

        for field, value in fields.items():
            setattr(prop, field, value)

        await commit_or_raise(self.db, "Failed to update property.")
        return await self.get_property(property_id), before

    async def delete_property(self, property_id: int) -> None:
        """Delete a listing together with its owners and activity log"""
        result = await self.db.execute(
            select(Property.id).where(
                Property.id == property_id,
                Property.broker_id == self.broker_id
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(message="Property not found.")

        await self.db.execute(
            delete(PropertyOwner).where(
                PropertyOwner.property_id == property_id,
                PropertyOwner.broker_id == self.broker_id
            )
        )
        await self.db.execute(
            delete(PropertyLog).where(
                PropertyLog.property_id == property_id,
                PropertyLog.broker_id == self.broker_id
            )
        )
        await self.db.execute(
            delete(Property).where(
                Property.id == property_id,
                Property.broker_id == self.broker_id
            )
        )
        await commit_or_raise(self.db, "Failed to delete property.")
        logger.info(f"Broker {self.broker_id} deleted property {property_id}")

    async def list_logs(self, property_id: int) -> List[PropertyLog]:
        """Activity timeline of a listing, newest first"""
        await self.get_property(property_id)
        result = await self.db.execute(
            select(PropertyLog)
            .where(
                PropertyLog.property_id == property_id,
                PropertyLog.broker_id == self.broker_id
            )
            .order_by(PropertyLog.created_at.desc(), PropertyLog.id.desc())
        )
        return list(result.scalars().all())
