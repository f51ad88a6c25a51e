"""
Pydantic schemas for prep lists and the prep items embedded in them.

Prep items are stored inside JSON array columns (prep_lists.items and
events.prep_items) using their camelCase names, so PrepItem accepts both
spellings and dumps by alias when written.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from prepchef.schemas.common import as_list, as_optional_str, as_str


class PrepItem(BaseModel):
    """A single line on a prep list or event."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Item identifier, unique within its list")
    name: str = Field("", description="What to prep", examples=["Dice onions"])
    quantity: str = Field("", description="Amount, kept as entered", examples=["5"])
    unit: str = Field("", description="Unit for the quantity", examples=["lbs"])
    category: Optional[str] = Field(None, description="Station or grouping")
    completed: Optional[bool] = Field(None, description="Whether the item is done")
    assigned_to: Optional[str] = Field(None, alias="assignedTo", description="Cook assigned")
    notes: Optional[str] = Field(None, description="Free-form notes")

    @field_validator("id", "name", "quantity", "unit", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("category", "assigned_to", "notes", mode="before")
    @classmethod
    def _stringify_optional(cls, value: Any) -> Any:
        return as_optional_str(value)


def parse_prep_items(value: Any) -> List[PrepItem]:
    """
    Parse a JSON array of prep items.

    Entries that are not objects, or that still fail validation after
    coercion, are dropped so one bad item never hides the rest of the list.
    """
    items: List[PrepItem] = []
    for entry in as_list(value):
        if isinstance(entry, PrepItem):
            items.append(entry)
        elif isinstance(entry, dict):
            try:
                items.append(PrepItem.model_validate(entry))
            except PydanticValidationError:
                continue
    return items


class PrepList(BaseModel):
    """An ordered collection of prep items."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Prep list identifier")
    name: str = Field("", description="Display name", examples=["Dinner Prep"])
    items: List[PrepItem] = Field(default_factory=list, description="Ordered prep items")
    company_id: Optional[str] = Field(None, description="Company scope for sharing")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")
    updated_at: Optional[str] = Field(None, description="ISO-8601 last update timestamp")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("items", mode="before")
    @classmethod
    def _items(cls, value: Any) -> List[Any]:
        return parse_prep_items(value)
