"""
Pydantic schemas for cooking methods (techniques).
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prepchef.schemas.common import as_str, as_str_list, parse_non_negative_int, unique

# Method difficulty enum (matches DB CHECK constraint)
DifficultyLevel = Literal["Beginner", "Intermediate", "Advanced"]
DIFFICULTY_LEVELS = ("Beginner", "Intermediate", "Advanced")


class Method(BaseModel):
    """A cooking technique with steps, required equipment and tips."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    description: Optional[str] = None
    category: Optional[str] = None
    video_url: Optional[str] = Field(None, alias="videoUrl")
    instructions: List[str] = Field(default_factory=list)
    estimated_time: Optional[int] = Field(None, ge=0, alias="estimatedTime")
    difficulty_level: DifficultyLevel = Field("Intermediate", alias="difficultyLevel")
    tags: List[str] = Field(default_factory=list)
    equipment: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    company_id: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("instructions", "equipment", "tips", mode="before")
    @classmethod
    def _string_arrays(cls, value: Any) -> List[str]:
        return as_str_list(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> List[str]:
        return unique(as_str_list(value))

    @field_validator("estimated_time", mode="before")
    @classmethod
    def _minutes(cls, value: Any) -> Optional[int]:
        return parse_non_negative_int(value)

    @field_validator("difficulty_level", mode="before")
    @classmethod
    def _default_level(cls, value: Any) -> Any:
        return value or "Intermediate"
