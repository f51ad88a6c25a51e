"""
Recipe service.

Handles saving, loading and deleting recipes.
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

from prepchef.schemas.common import choice, clean_optional_str
from prepchef.schemas.recipes import RECIPE_DIFFICULTIES, Recipe
from prepchef.services.mapping import as_model, require_text
from prepchef.services.operation_guard import derive_operation_key

if TYPE_CHECKING:
    from prepchef.services.database import DatabaseService

logger = logging.getLogger(__name__)

TABLE = "recipes"


def recipe_to_row(
    recipe: Union[Recipe, Mapping[str, Any]],
    user_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Sanitize a recipe into a recipes row.

    Optional text fields are trimmed and stored as NULL when blank; times
    that could not be parsed are stored as NULL.

    Raises:
        ValidationError: If the id or the trimmed name is empty
    """
    recipe = as_model(Recipe, recipe)
    message = "Recipe must have valid ID and name"

    row: Dict[str, Any] = {
        "id": require_text(recipe.id, message),
        "name": require_text(recipe.name, message),
        "description": clean_optional_str(recipe.description),
        "ingredients": list(recipe.ingredients),
        "instructions": list(recipe.instructions),
        "yield": clean_optional_str(recipe.yield_),
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "total_time": recipe.total_time,
        "difficulty": recipe.difficulty,
        "tags": list(recipe.tags),
        "notes": clean_optional_str(recipe.notes),
        "image": clean_optional_str(recipe.image),
        "company_id": clean_optional_str(recipe.company_id),
    }
    if user_id:
        row["user_id"] = user_id
    return row


def recipe_from_row(row: Mapping[str, Any]) -> Recipe:
    return Recipe(
        id=row.get("id"),
        name=row.get("name"),
        description=row.get("description"),
        ingredients=row.get("ingredients"),
        instructions=row.get("instructions"),
        yield_=row.get("yield"),
        prep_time=row.get("prep_time"),
        cook_time=row.get("cook_time"),
        total_time=row.get("total_time"),
        difficulty=choice(row.get("difficulty"), RECIPE_DIFFICULTIES, "Medium"),
        tags=row.get("tags"),
        notes=row.get("notes"),
        image=row.get("image"),
        company_id=row.get("company_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


async def save_recipe(db: "DatabaseService", recipe: Union[Recipe, Mapping[str, Any]]) -> Recipe:
    """
    Create or update a recipe (upsert by id).

    Raises:
        ValidationError: Missing id or name
        AuthRequiredError: No user signed in
        RemoteOperationError: Backend failure
    """
    recipe = as_model(Recipe, recipe)
    row = recipe_to_row(recipe)
    row["user_id"] = db.require_identity("save recipes").id

    logger.debug(f"Saving recipe {row['id']}")
    key = derive_operation_key("save_recipe", row["id"])
    return await db.upsert_row(
        "save_recipe", TABLE, row, key,
        duplicate_result=recipe,
        from_row=recipe_from_row,
    )


async def load_recipes(db: "DatabaseService") -> List[Recipe]:
    return await db.select_rows("load_recipes", TABLE, "created_at", recipe_from_row)


async def delete_recipe(db: "DatabaseService", recipe_id: str) -> None:
    await db.delete_row("delete_recipe", TABLE, recipe_id)
