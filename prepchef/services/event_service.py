"""
Event service.

Events carry their own prep items (events.prep_items JSON column) and are
listed by event date rather than creation time.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from prepchef.schemas.common import choice, clean_optional_str
from prepchef.schemas.events import EVENT_STATUSES, Event
from prepchef.services.mapping import as_model, prep_items_to_json, require_text
from prepchef.services.operation_guard import derive_operation_key

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

TABLE = "events"


def event_to_row(
    event: Union[Event, Mapping[str, Any]],
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Sanitize an event into an events row.

    total_servings is already a non-negative int on the model ("50" -> 50,
    garbage -> 0).

    Raises:
        ValidationError: If the id, trimmed name or date is empty
    """
    event = as_model(Event, event)
    message = "Event must have valid ID, name, and date"

    row: Dict[str, Any] = {
        "id": require_text(event.id, message),
        "name": require_text(event.name, message),
        "date": require_text(event.date, message),
        "invoice_number": clean_optional_str(event.invoice_number),
        "prep_items": prep_items_to_json(event.prep_items),
        "status": event.status,
        "total_servings": event.total_servings,
        "company_id": clean_optional_str(event.company_id),
    }
    if user_id:
        row["user_id"] = user_id
    return row


def event_from_row(row: Mapping[str, Any]) -> Event:
    return Event(
        id=row.get("id"),
        name=row.get("name"),
        date=row.get("date"),
        invoice_number=row.get("invoice_number"),
        prep_items=row.get("prep_items"),
        status=choice(row.get("status"), EVENT_STATUSES, "planning"),
        total_servings=row.get("total_servings"),
        company_id=row.get("company_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def save_event(db: "DatabaseService", event: Union[Event, Mapping[str, Any]]) -> Event:
    """
    Create or update an event (upsert by id).

    Raises:
        ValidationError: Missing id, name or date
        AuthRequiredError: No user signed in
        RemoteOperationError: Backend failure
    """
    event = as_model(Event, event)
    row = event_to_row(event)
    row["user_id"] = db.require_identity("save events").id

    logger.debug(f"Saving event {row['id']} on {row['date']}")
    key = derive_operation_key("save_event", row["id"], row["name"])
    return await db.upsert_row(
        "save_event", TABLE, row, key,
        duplicate_result=event,
        from_row=event_from_row,
    )


async def load_events(db: "DatabaseService") -> List[Event]:
    """All events visible to the caller, latest event date first."""
    return await db.select_rows("load_events", TABLE, "date", event_from_row)


async def delete_event(db: "DatabaseService", event_id: str) -> None:
    await db.delete_row("delete_event", TABLE, event_id)
