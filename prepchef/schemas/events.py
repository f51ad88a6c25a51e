"""
Pydantic schemas for catering events.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prepchef.schemas.common import as_str, parse_non_negative_int
from prepchef.schemas.prep_lists import PrepItem, parse_prep_items

# Event status enum (matches DB CHECK constraint)
EventStatus = Literal["planning", "prep", "active", "complete"]
EVENT_STATUSES = ("planning", "prep", "active", "complete")


class Event(BaseModel):
    """A dated event with its own prep items and serving count."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field("", description="Event identifier")
    name: str = Field("", description="Event name", examples=["Gala"])
    date: str = Field("", description="Event date (ISO-8601)", examples=["2025-01-01"])
    invoice_number: Optional[str] = Field(None, alias="invoiceNumber")
    prep_items: List[PrepItem] = Field(default_factory=list, alias="prepItems")
    status: EventStatus = Field("planning", description="Lifecycle stage")
    total_servings: int = Field(0, ge=0, alias="totalServings")
    company_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", "name", "date", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("prep_items", mode="before")
    @classmethod
    def _prep_items(cls, value: Any) -> List[Any]:
        return parse_prep_items(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: Any) -> Any:
        return value or "planning"

    @field_validator("total_servings", mode="before")
    @classmethod
    def _servings(cls, value: Any) -> int:
        return parse_non_negative_int(value, 0) or 0
