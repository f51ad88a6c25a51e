"""
Container service.

Handles saving, loading and deleting storage containers.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from prepchef.schemas.common import clean_optional_str
from prepchef.schemas.containers import Container
from prepchef.services.mapping import as_model, require_text
from prepchef.services.operation_guard import derive_operation_key

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

TABLE = "containers"


def container_to_row(
    container: Union[Container, Mapping[str, Any]],
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Sanitize a container into a containers row.

    Raises:
        ValidationError: If the id, trimmed name or type is empty
    """
    container = as_model(Container, container)
    message = "Container must have valid ID and name"

    row: Dict[str, Any] = {
        "id": require_text(container.id, message),
        "name": require_text(container.name, message),
        "type": require_text(container.type, "Container must have a type"),
        "size": clean_optional_str(container.size),
        "description": clean_optional_str(container.description),
        "company_id": clean_optional_str(container.company_id),
    }
    if user_id:
        row["user_id"] = user_id
    return row


def container_from_row(row: Mapping[str, Any]) -> Container:
    return Container(
        id=row.get("id"),
        name=row.get("name"),
        type=row.get("type"),
        size=row.get("size"),
        description=row.get("description"),
        company_id=row.get("company_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def save_container(
    db: "DatabaseService",
    container: Union[Container, Mapping[str, Any]]
) -> Container:
    """
    Create or update a container (upsert by id).

    Raises:
        ValidationError: Missing id, name or type
        AuthRequiredError: No user signed in
        RemoteOperationError: Backend failure
    """
    container = as_model(Container, container)
    row = container_to_row(container)
    row["user_id"] = db.require_identity("save containers").id

    logger.debug(f"Saving container {row['id']} ({row['type']})")
    key = derive_operation_key("save_container", row["id"])
    return await db.upsert_row(
        "save_container", TABLE, row, key,
        duplicate_result=container,
        from_row=container_from_row,
    )


async def load_containers(db: "DatabaseService") -> List[Container]:
    return await db.select_rows("load_containers", TABLE, "created_at", container_from_row)


async def delete_container(db: "DatabaseService", container_id: str) -> None:
    await db.delete_row("delete_container", TABLE, container_id)
