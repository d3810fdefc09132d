"""Ownership timeline service

Keeps at most one owner per property flagged as current. Before an owner is
written with ``is_current_owner`` set, every other current owner of the same
property is cleared and given today's date as its end date.

The clear and the write are two separate commits. A failed clear is logged
and the write goes ahead anyway, and two requests setting different current
owners at the same time can interleave; either case leaves the property with
two current owners until the next write that sets the flag.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import commit_or_raise
from app.exceptions import NotFoundError
from app.models.owner import PropertyOwner
from app.models.property import Property
from app.services.activity_log import snapshot

logger = logging.getLogger(__name__)

# Writable owner fields
OWNER_FIELDS = (
    "owner_name",
    "phone_number",
    "start_date",
    "end_date",
    "is_current_owner",
    "notes",
)


def _clear_current_statement(property_id: int, broker_id: int, keep_owner_id: Optional[int] = None):
    stmt = (
        update(PropertyOwner)
        .where(
            PropertyOwner.property_id == property_id,
            PropertyOwner.broker_id == broker_id,
            PropertyOwner.is_current_owner.is_(True),
        )
        .values(is_current_owner=False, end_date=date.today())
    )
    if keep_owner_id is not None:
        stmt = stmt.where(PropertyOwner.id != keep_owner_id)
    return stmt


async def clear_current_owner(
    db: AsyncSession,
    property_id: int,
    broker_id: int,
    keep_owner_id: Optional[int] = None
) -> bool:
    """Unset the current flag on the property's other owners and commit

    Returns False when the clear failed. Failures are not raised. A rollback
    expires every instance held by ``db``, so callers reload what they need.
    """
    try:
        await db.execute(_clear_current_statement(property_id, broker_id, keep_owner_id))
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning(f"Could not clear current owner for property {property_id}: {e}")
        return False
    return True


class OwnershipService:
    """Owner records of one broker's properties"""

    def __init__(self, db: AsyncSession, broker_id: int):
        self.db = db
        self.broker_id = broker_id

    async def _require_property(self, property_id: int) -> None:
        result = await self.db.execute(
            select(Property.id).where(
                Property.id == property_id,
                Property.broker_id == self.broker_id
            )
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError(message="Property not found.")

    async def get_owner(self, owner_id: int) -> PropertyOwner:
        result = await self.db.execute(
            select(PropertyOwner)
            .where(
                PropertyOwner.id == owner_id,
                PropertyOwner.broker_id == self.broker_id
            )
            .execution_options(populate_existing=True)
        )
        owner = result.scalar_one_or_none()
        if not owner:
            raise NotFoundError(message="Owner not found.")
        return owner

    async def list_owners(self, property_id: int) -> List[PropertyOwner]:
        """Ownership history, most recent start date first"""
        await self._require_property(property_id)
        result = await self.db.execute(
            select(PropertyOwner)
            .where(
                PropertyOwner.property_id == property_id,
                PropertyOwner.broker_id == self.broker_id
            )
            .order_by(PropertyOwner.start_date.desc(), PropertyOwner.id.desc())
        )
        return list(result.scalars().all())

    async def add_owner(self, property_id: int, fields: Dict[str, Any]) -> PropertyOwner:
        await self._require_property(property_id)

        if fields.get("is_current_owner"):
            await clear_current_owner(self.db, property_id, self.broker_id)

        owner = PropertyOwner(
            **fields,
            property_id=property_id,
            broker_id=self.broker_id
        )
        self.db.add(owner)
        await commit_or_raise(self.db, "Failed to add owner.")
        await self.db.refresh(owner)

        logger.info(f"Broker {self.broker_id} added owner {owner.id} to property {property_id}")
        return owner

    async def update_owner(self, owner_id: int, fields: Dict[str, Any]) -> Tuple[PropertyOwner, Dict[str, Any]]:
        """Apply ``fields``; returns the updated owner and its prior state"""
        owner = await self.get_owner(owner_id)
        before = snapshot(owner, OWNER_FIELDS)

        if fields.get("is_current_owner"):
            await clear_current_owner(self.db, owner.property_id, self.broker_id, keep_owner_id=owner.id)
            owner = await self.get_owner(owner_id)

        for field, value in fields.items():
            setattr(owner, field, value)

        await commit_or_raise(self.db, "Failed to update owner.")
        await self.db.refresh(owner)
        return owner, before

    async def delete_owner(self, owner_id: int) -> PropertyOwner:
        """Remove an owner record; the returned instance is detached"""
        owner = await self.get_owner(owner_id)
        await self.db.delete(owner)
        await commit_or_raise(self.db, "Failed to delete owner.")
        return owner
