"""
Domain model for todo items held by the scoped store.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class TodoItem(BaseModel):
    """A single todo entry tagged with the user that owns it."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner_id: str
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["TodoItem"]
