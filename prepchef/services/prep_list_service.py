"""
Prep list service.

Handles saving, loading and deleting prep lists. Items are stored in the
prep_lists.items JSON column.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from prepchef.schemas.common import clean_optional_str
from prepchef.schemas.prep_lists import PrepList
from prepchef.services.mapping import as_model, prep_items_to_json, require_text
from prepchef.services.operation_guard import derive_operation_key

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

TABLE = "prep_lists"


def prep_list_to_row(
    prep_list: Union[PrepList, Mapping[str, Any]],
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Sanitize a prep list into a prep_lists row.

    Raises:
        ValidationError: If the id or the trimmed name is empty
    """
    prep_list = as_model(PrepList, prep_list)
    message = "Prep list must have a valid ID and name"

    row: Dict[str, Any] = {
        "id": require_text(prep_list.id, message),
        "name": require_text(prep_list.name, message),
        "items": prep_items_to_json(prep_list.items),
        "company_id": clean_optional_str(prep_list.company_id),
    }
    if user_id:
        row["user_id"] = user_id
    return row


def prep_list_from_row(row: Mapping[str, Any]) -> PrepList:
    return PrepList(
        id=row.get("id"),
        name=row.get("name"),
        items=row.get("items"),
        company_id=row.get("company_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def save_prep_list(
    db: "DatabaseService",
    prep_list: Union[PrepList, Mapping[str, Any]]
) -> PrepList:
    """
    Create or update a prep list (upsert by id).

    Args:
        db: The DatabaseService
        prep_list: Prep list to store; name is trimmed, items default to []

    Returns:
        The stored prep list with server timestamps

    Raises:
        ValidationError: Missing id or name
        AuthRequiredError: No user signed in
        RemoteOperationError: Backend failure
    """
    prep_list = as_model(PrepList, prep_list)
    row = prep_list_to_row(prep_list)
    row["user_id"] = db.require_identity("save prep lists").id

    logger.debug(f"Saving prep list {row['id']} ({len(row['items'])} items)")
    key = derive_operation_key("save_prep_list", row["id"], row["name"])
    return await db.upsert_row(
        "save_prep_list", TABLE, row, key,
        duplicate_result=prep_list,
        from_row=prep_list_from_row,
    )


async def load_prep_lists(db: "DatabaseService") -> List[PrepList]:
    """All prep lists visible to the caller, newest first."""
    return await db.select_rows("load_prep_lists", TABLE, "created_at", prep_list_from_row)


async def delete_prep_list(db: "DatabaseService", prep_list_id: str) -> None:
    await db.delete_row("delete_prep_list", TABLE, prep_list_id)
