"""
Pydantic models for the todo endpoints.

Field names are serialized in camelCase to match the browser client.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from todo_service.models.todo import TodoItem

TODO_TEXT_MAX_LENGTH = 500


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _clean_text(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Todo text must not be blank.")
    return cleaned


class TodoCreateRequest(_CamelModel):
    """Incoming payload for creating a todo item."""

    text: str = Field(..., max_length=TODO_TEXT_MAX_LENGTH)

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: str) -> str:
        return _clean_text(value)


class TodoUpdateRequest(_CamelModel):
    """Partial update; omitted fields keep their stored value."""

    text: Optional[str] = Field(None, max_length=TODO_TEXT_MAX_LENGTH)
    completed: Optional[bool] = None

    @field_validator("text")
    @classmethod
    def _validate_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _clean_text(value)


class TodoResponse(_CamelModel):
    """Todo item as returned to its owner."""

    id: str
    text: str
    completed: bool
    created_at: datetime
    user_id: str

    @classmethod
    def from_item(cls, item: TodoItem) -> "TodoResponse":
        return cls(
            id=item.id,
            text=item.text,
            completed=item.completed,
            created_at=item.created_at,
            user_id=item.owner_id,
        )


__all__ = [
    "TODO_TEXT_MAX_LENGTH",
    "TodoCreateRequest",
    "TodoResponse",
    "TodoUpdateRequest",
]
