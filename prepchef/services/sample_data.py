"""
Sample data for manual testing against a real project.

Creates one recognisable row per entity table (names start with "Test ") for
the signed-in user, and removes them again. Rows are created through the
normal save operations, so they exercise validation, the operation guard and
RLS exactly like application writes.
"""

import logging
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, cast

from prepchef.errors import error_message
from prepchef.schemas.containers import Container
from prepchef.schemas.events import Event
from prepchef.schemas.methods import Method
from prepchef.schemas.prep_lists import PrepItem, PrepList
from prepchef.schemas.recipes import Recipe
from prepchef.services.container_service import save_container
from prepchef.services.diagnostics import ENTITY_TABLES
from prepchef.services.event_service import save_event
from prepchef.services.method_service import save_method
from prepchef.services.prep_list_service import save_prep_list
from prepchef.services.recipe_service import save_recipe

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

SAMPLE_NAME_PATTERN = "Test %"


async def create_sample_data(db: "DatabaseService") -> Dict[str, int]:
    """
    Save one sample prep list, event, recipe, method and container.

    Returns:
        Number of rows created per table

    Raises:
        AuthRequiredError: If no user is signed in
    """
    identity = db.require_identity("create sample data")
    now = datetime.now()
    label = now.strftime("%H:%M:%S")

    await save_prep_list(db, PrepList(
        id=str(uuid.uuid4()),
        name=f"Test Prep List {label}",
        items=[
            PrepItem(id="1", name="Test Item 1", quantity="5", unit="lbs"),
            PrepItem(id="2", name="Test Item 2", quantity="10", unit="pieces"),
        ],
    ))
    await save_event(db, Event(
        id=str(uuid.uuid4()),
        name=f"Test Event {label}",
        date=now.date().isoformat(),
        status="planning",
        total_servings=50,
    ))
    await save_recipe(db, Recipe(
        id=str(uuid.uuid4()),
        name=f"Test Recipe {label}",
        description="A test recipe for debugging",
        ingredients=["Test ingredient 1", "Test ingredient 2"],
        instructions=["Test instruction 1", "Test instruction 2"],
        difficulty="Easy",
    ))
    await save_method(db, Method(
        id=str(uuid.uuid4()),
        name=f"Test Method {label}",
        description="A test cooking method",
        instructions=["Step 1", "Step 2"],
        difficulty_level="Beginner",
    ))
    await save_container(db, Container(
        id=str(uuid.uuid4()),
        name=f"Test Container {label}",
        type="storage",
        size="medium",
    ))

    created = {table: 1 for table in ENTITY_TABLES}
    logger.info(f"Sample data created for user {identity.id}: {created}")
    return created


async def cleanup_sample_data(db: "DatabaseService") -> int:
    """
    Delete the caller's rows whose name starts with "Test " from every entity table.

    A failure on one table is logged and the remaining tables are still
    cleaned.

    Returns:
        Total number of rows deleted

    Raises:
        AuthRequiredError: If no user is signed in
    """
    identity = db.require_identity("clean up sample data")

    async def _cleanup() -> int:
        client = db.require_client()
        deleted = 0
        for table in ENTITY_TABLES:
            try:
                result = await (
                    client.table(table)
                    .select("id, name")
                    .ilike("name", SAMPLE_NAME_PATTERN)
                    .eq("user_id", identity.id)
                    .execute()
                )
                rows = cast(List[Dict[str, Any]], result.data or [])
                if not rows:
                    continue
                ids = [row["id"] for row in rows]
                await client.table(table).delete().in_("id", ids).execute()
            except Exception as exc:
                logger.warning(f"Failed to clean up sample rows from {table}: {error_message(exc)}")
                continue

            for row_id in ids:
                db.guard.forget_entity(row_id)
            deleted += len(rows)
            logger.info(f"Cleaned up {len(rows)} sample rows from {table}")
        return deleted

    deleted = await db.execute("cleanup_sample_data", _cleanup)
    logger.info(f"Sample data cleanup completed - deleted {deleted} rows")
    return deleted
