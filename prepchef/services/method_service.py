"""
Cooking method service.

Handles saving, loading and deleting methods.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from prepchef.schemas.common import choice, clean_optional_str
from prepchef.schemas.methods import DIFFICULTY_LEVELS, Method
from prepchef.services.mapping import as_model, require_text
from prepchef.services.operation_guard import derive_operation_key

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

TABLE = "methods"


def method_to_row(
    method: Union[Method, Mapping[str, Any]],
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Sanitize a method into a methods row.

    Raises:
        ValidationError: If the id or the trimmed name is empty
    """
    method = as_model(Method, method)
    message = "Method must have valid ID and name"

    row: Dict[str, Any] = {
        "id": require_text(method.id, message),
        "name": require_text(method.name, message),
        "description": clean_optional_str(method.description),
        "category": clean_optional_str(method.category),
        "video_url": clean_optional_str(method.video_url),
        "instructions": list(method.instructions),
        "estimated_time": method.estimated_time,
        "difficulty_level": method.difficulty_level,
        "tags": list(method.tags),
        "equipment": list(method.equipment),
        "tips": list(method.tips),
        "company_id": clean_optional_str(method.company_id),
    }
    if user_id:
        row["user_id"] = user_id
    return row


def method_from_row(row: Mapping[str, Any]) -> Method:
    return Method(
        id=row.get("id"),
        name=row.get("name"),
        description=row.get("description"),
        category=row.get("category"),
        video_url=row.get("video_url"),
        instructions=row.get("instructions"),
        estimated_time=row.get("estimated_time"),
        difficulty_level=choice(row.get("difficulty_level"), DIFFICULTY_LEVELS, "Intermediate"),
        tags=row.get("tags"),
        equipment=row.get("equipment"),
        tips=row.get("tips"),
        company_id=row.get("company_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def save_method(db: "DatabaseService", method: Union[Method, Mapping[str, Any]]) -> Method:
    """
    Create or update a method (upsert by id).

    Raises:
        ValidationError: Missing id or name
        AuthRequiredError: No user signed in
        RemoteOperationError: Backend failure
    """
    method = as_model(Method, method)
    row = method_to_row(method)
    row["user_id"] = db.require_identity("save methods").id

    logger.debug(f"Saving method {row['id']}")
    key = derive_operation_key("save_method", row["id"])
    return await db.upsert_row(
        "save_method", TABLE, row, key,
        duplicate_result=method,
        from_row=method_from_row,
    )


async def load_methods(db: "DatabaseService") -> List[Method]:
    return await db.select_rows("load_methods", TABLE, "created_at", method_from_row)


async def delete_method(db: "DatabaseService", method_id: str) -> None:
    await db.delete_row("delete_method", TABLE, method_id)
