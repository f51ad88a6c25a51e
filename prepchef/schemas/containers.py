"""
Pydantic schemas for storage containers.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prepchef.schemas.common import as_str


class Container(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    type: str = Field("", description="Container kind", examples=["storage", "hotel pan"])
    size: Optional[str] = Field(None, examples=["medium", "1/2"])
    description: Optional[str] = None
    company_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("id", "name", "type", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)
