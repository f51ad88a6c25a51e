"""
Helpers shared by the per-entity row mappers.
"""

from typing import Any, Dict, List, Mapping, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from prepchef.errors import ValidationError
from prepchef.schemas.prep_lists import PrepItem

M = TypeVar("M", bound=BaseModel)


def as_model(model_cls: Type[M], value: Union[M, Mapping[str, Any]]) -> M:
    """Accept either a model instance or a plain mapping (camelCase or snake_case keys)."""
    if isinstance(value, model_cls):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump()
    try:
        return model_cls.model_validate(dict(value))
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {model_cls.__name__}: {exc.error_count()} field error(s)") from exc


def require_text(value: Any, message: str) -> str:
    """Trimmed required string, or ValidationError."""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(message)
    return text


def prep_items_to_json(items: List[PrepItem]) -> List[Dict[str, Any]]:
    """Prep items as stored in JSON columns: camelCase keys, unset fields omitted."""
    return [item.model_dump(by_alias=True, exclude_none=True) for item in items]


def is_complete_row(row: Any) -> bool:
    """Rows without an id or a name are partial or corrupt and are skipped on read."""
    if not isinstance(row, Mapping):
        return False
    return bool(row.get("id")) and bool(str(row.get("name") or "").strip())
