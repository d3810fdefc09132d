"""Property search

Filters a broker's listings in two passes. The primary pass is a single
query: exact filters, partial (case-insensitive substring) filters and the
free-text term ORed across the listing's text columns. Owners are a nested
collection, so matching on owner name or phone happens in memory afterwards.

When a free-text term finds nothing in the listing columns and no owner
filter was given, the broker's whole portfolio is re-read and matched on
owner name/phone instead. That fallback only runs for an empty primary
result; a term that matches one listing's locality and another listing's
owner returns just the first.
"""
import logging
from dataclasses import dataclass, fields
from enum import Enum
from typing import Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.owner import PropertyOwner
from app.models.property import Property, PropertyType, PropertyStatus, FurnishedStatus

logger = logging.getLogger(__name__)

# Columns searched by the free-text term
TEXT_SEARCH_COLUMNS = (
    Property.city,
    Property.area,
    Property.locality,
    Property.address,
    Property.survey_no,
    Property.notes,
)


@dataclass
class SearchFilters:
    """Optional search parameters; blank strings count as not supplied"""
    q: Optional[str] = None
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    bhk: Optional[int] = None
    furnished_status: Optional[FurnishedStatus] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    area: Optional[str] = None
    city: Optional[str] = None
    survey_no: Optional[str] = None
    owner_name: Optional[str] = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, str) and not isinstance(value, Enum):
                setattr(self, f.name, value.strip() or None)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, term: str):
    return column.ilike(f"%{escape_like(term)}%", escape="\\")


def owner_matches(owners: Iterable[PropertyOwner], term: str) -> bool:
    """True if any owner's name contains ``term`` (any case) or phone contains it"""
    needle = term.strip()
    lowered = needle.lower()
    for owner in owners:
        if owner.owner_name and lowered in owner.owner_name.lower():
            return True
        if owner.phone_number and needle in owner.phone_number:
            return True
    return False


class PropertySearchResolver:
    """Resolves a search for one broker"""

    def __init__(self, db: AsyncSession, broker_id: int):
        self.db = db
        self.broker_id = broker_id

    def _base_query(self):
        return (
            select(Property)
            .options(selectinload(Property.owners))
            .where(Property.broker_id == self.broker_id)
            .order_by(Property.created_at.desc(), Property.id.desc())
        )

    def build_query(self, filters: SearchFilters):
        """Primary query with every filter that the store can evaluate"""
        query = self._base_query()

        # Exact filters
        if filters.property_type is not None:
            query = query.where(Property.property_type == filters.property_type)
        if filters.status is not None:
            query = query.where(Property.status == filters.status)
        # A zero bhk or price bound counts as not supplied
        if filters.bhk:
            query = query.where(Property.bhk == filters.bhk)
        if filters.furnished_status is not None:
            query = query.where(Property.furnished_status == filters.furnished_status)
        if filters.min_price:
            query = query.where(Property.total_price >= filters.min_price)
        if filters.max_price:
            query = query.where(Property.total_price <= filters.max_price)

        # Partial filters
        if filters.area:
            query = query.where(_contains(Property.area, filters.area))
        if filters.city:
            query = query.where(_contains(Property.city, filters.city))
        if filters.survey_no:
            query = query.where(_contains(Property.survey_no, filters.survey_no))

        if filters.q:
            query = query.where(or_(*(_contains(column, filters.q) for column in TEXT_SEARCH_COLUMNS)))

        return query

    async def _fetch(self, query) -> List[Property]:
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def search(self, filters: SearchFilters) -> List[Property]:
        results = await self._fetch(self.build_query(filters))

        if filters.owner_name:
            results = [p for p in results if owner_matches(p.owners, filters.owner_name)]

        if filters.q and not filters.owner_name and not results:
            logger.debug(f"No column match for {filters.q!r}; matching owners of broker {self.broker_id}")
            portfolio = await self._fetch(self._base_query())
            results = [p for p in portfolio if owner_matches(p.owners, filters.q)]

        return results
