"""Activity log service

Derives human-readable change entries from before/after snapshots of
properties and owners and appends them to ``property_logs``.

Writes happen in a session of their own, after the triggering mutation has
committed. A failed write is logged and dropped: the activity log never
fails or rolls back the change it describes.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database import async_session_maker
from app.models.property_log import PropertyLog, LogAction
from app.services.formatting import PLACEHOLDER, RUPEE, as_text, format_price

logger = logging.getLogger(__name__)


# Tracked property fields and their display labels, in log order
FIELD_LABELS: Dict[str, str] = {
    "status": "Status",
    "property_type": "Property Type",
    "total_price": "Total Price",
    "price_per_sqft": "Price/sq.ft",
    "city": "City",
    "area": "Area",
    "locality": "Locality",
    "address": "Address",
    "bhk": "BHK",
    "furnished_status": "Furnished Status",
    "floor_number": "Floor",
    "total_floors": "Total Floors",
    "plot_area": "Plot Area",
    "built_up_area": "Built-up Area",
    "carpet_area": "Carpet Area",
    "survey_no": "Survey No",
    "lat": "Latitude",
    "lng": "Longitude",
    "notes": "Notes",
}

CURRENCY_FIELDS = frozenset({"total_price", "price_per_sqft"})

OWNER_TRACKED_FIELDS = ("owner_name", "phone_number", "is_current_owner")


@dataclass
class FieldChange:
    """A single tracked field whose value changed"""
    field_name: str
    old_value: Optional[str]
    new_value: Optional[str]
    description: str


def format_value(field: str, value: Any) -> str:
    """Render a field value for a log description"""
    if value is None or value == "":
        return PLACEHOLDER
    if field in CURRENCY_FIELDS:
        formatted = format_price(value)
        return formatted if formatted == PLACEHOLDER else f"{RUPEE}{formatted}"
    return as_text(value)


def snapshot(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Copy the named attributes of an ORM object into a plain dict"""
    return {field: getattr(obj, field, None) for field in fields}


def diff_property(old: Mapping[str, Any], new: Mapping[str, Any]) -> List[FieldChange]:
    """Compare tracked fields present in ``new`` against ``old``

    Values are compared by their string form, so 3 and "3" are equal.
    Fields absent from ``new`` are not considered changed.
    """
    changes = []
    for field, label in FIELD_LABELS.items():
        if field not in new:
            continue
        old_val = old.get(field)
        new_val = new[field]
        if as_text(old_val) == as_text(new_val):
            continue
        changes.append(FieldChange(
            field_name=field,
            old_value=None if old_val is None else as_text(old_val),
            new_value=None if new_val is None else as_text(new_val),
            description=(
                f'{label} changed from "{format_value(field, old_val)}" '
                f'to "{format_value(field, new_val)}"'
            ),
        ))
    return changes


def describe_owner_changes(old: Mapping[str, Any], new: Mapping[str, Any]) -> Optional[str]:
    """Combine name, phone and current-flag changes into one description

    Returns None when none of the three changed.
    """
    clauses = []

    new_name = new.get("owner_name")
    if new_name and new_name != old.get("owner_name"):
        clauses.append(f'name changed from "{old.get("owner_name")}" to "{new_name}"')

    if "phone_number" in new and as_text(new["phone_number"]) != as_text(old.get("phone_number")):
        clauses.append(
            f'phone changed from "{old.get("phone_number") or PLACEHOLDER}" '
            f'to "{new["phone_number"] or PLACEHOLDER}"'
        )

    if "is_current_owner" in new and bool(new["is_current_owner"]) != bool(old.get("is_current_owner")):
        clauses.append("marked as current owner" if new["is_current_owner"] else "removed as current owner")

    if not clauses:
        return None
    return f'Owner "{old.get("owner_name")}" — {", ".join(clauses)}'


def describe_property_created(data: Mapping[str, Any]) -> str:
    location = ", ".join(
        str(part) for part in (data.get("locality"), data.get("area"), data.get("city")) if part
    )
    property_type = as_text(data.get("property_type"))
    return f"Property created — {property_type}" + (f" in {location}" if location else "")


class ActivityLogger:
    """Appends activity entries for a broker's properties"""

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self.session_factory = session_factory

    async def _write(self, entries: List[PropertyLog]) -> int:
        """Insert entries as one batch; returns how many were stored"""
        if not entries:
            return 0
        try:
            async with self.session_factory() as session:
                session.add_all(entries)
                await session.commit()
        except Exception as e:
            logger.warning(
                f"Dropping {len(entries)} activity log entries for property "
                f"{entries[0].property_id}: {e}"
            )
            return 0
        return len(entries)

    async def log_property_created(self, property_id: int, broker_id: int, data: Mapping[str, Any]) -> int:
        return await self._write([PropertyLog(
            property_id=property_id,
            broker_id=broker_id,
            action=LogAction.CREATED,
            description=describe_property_created(data),
        )])

    async def log_property_updated(
        self,
        property_id: int,
        broker_id: int,
        old: Mapping[str, Any],
        new: Mapping[str, Any]
    ) -> int:
        """Write one entry per tracked field that changed"""
        entries = [
            PropertyLog(
                property_id=property_id,
                broker_id=broker_id,
                action=LogAction.UPDATED,
                field_name=change.field_name,
                old_value=change.old_value,
                new_value=change.new_value,
                description=change.description,
            )
            for change in diff_property(old, new)
        ]
        return await self._write(entries)

    async def log_owner_added(self, property_id: int, broker_id: int, owner_name: str) -> int:
        return await self._write([PropertyLog(
            property_id=property_id,
            broker_id=broker_id,
            action=LogAction.OWNER_ADDED,
            description=f"New owner added — {owner_name}",
        )])

    async def log_owner_updated(
        self,
        property_id: int,
        broker_id: int,
        old_owner: Mapping[str, Any],
        new: Mapping[str, Any]
    ) -> int:
        description = describe_owner_changes(old_owner, new)
        if description is None:
            return 0
        return await self._write([PropertyLog(
            property_id=property_id,
            broker_id=broker_id,
            action=LogAction.OWNER_UPDATED,
            description=description,
        )])

    async def log_owner_removed(self, property_id: int, broker_id: int, owner_name: str) -> int:
        return await self._write([PropertyLog(
            property_id=property_id,
            broker_id=broker_id,
            action=LogAction.OWNER_REMOVED,
            description=f"Owner removed — {owner_name}",
        )])


def get_activity_logger() -> ActivityLogger:
    """Dependency providing the activity logger"""
    return ActivityLogger(async_session_maker)
