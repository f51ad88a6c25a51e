"""
Pydantic schemas for recipes.

Times are whole minutes (the columns are integers). Tags behave like a set:
duplicates are dropped but the first-seen order is kept.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from prepchef.schemas.common import as_str, as_str_list, parse_non_negative_int, unique

# Recipe difficulty enum (matches DB CHECK constraint)
RecipeDifficulty = Literal["Easy", "Medium", "Hard"]
RECIPE_DIFFICULTIES = ("Easy", "Medium", "Hard")


class Recipe(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    name: str = ""
    description: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    yield_: Optional[str] = Field(None, alias="yield", description="e.g. '12 portions'")
    prep_time: Optional[int] = Field(None, ge=0, alias="prepTime")
    cook_time: Optional[int] = Field(None, ge=0, alias="cookTime")
    total_time: Optional[int] = Field(None, ge=0, alias="totalTime")
    difficulty: RecipeDifficulty = "Medium"
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    image: Optional[str] = Field(None, description="Image URL or storage reference")
    company_id: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")

    @field_validator("id", "name", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return as_str(value)

    @field_validator("ingredients", "instructions", mode="before")
    @classmethod
    def _steps(cls, value: Any) -> List[str]:
        return as_str_list(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value: Any) -> List[str]:
        return unique(as_str_list(value))

    @field_validator("prep_time", "cook_time", "total_time", mode="before")
    @classmethod
    def _minutes(cls, value: Any) -> Optional[int]:
        return parse_non_negative_int(value)

    @field_validator("difficulty", mode="before")
    @classmethod
    def _default_difficulty(cls, value: Any) -> Any:
        return value or "Medium"
