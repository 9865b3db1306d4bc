"""In-memory todo storage where every access is scoped to an owner."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from todo_service.models.todo import TodoItem


class TodoNotFoundError(Exception):
    """Raised when an item is missing or belongs to another user."""


class TodoStore:
    """Keyed todo collection; items owned by other users are never visible."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: Dict[str, TodoItem] = {}

    def _owned(self, owner_id: str, item_id: str) -> TodoItem:
        item = self._items.get(item_id)
        if item is None or item.owner_id != owner_id:
            raise TodoNotFoundError(f"Todo {item_id!r} not found.")
        return item

    def list_for(self, owner_id: str) -> List[TodoItem]:
        with self._lock:
            items = [item for item in self._items.values() if item.owner_id == owner_id]
        return sorted(items, key=lambda item: item.created_at)

    def create(self, owner_id: str, text: str) -> TodoItem:
        item = TodoItem(
            id=str(uuid4()),
            owner_id=owner_id,
            text=text,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._items[item.id] = item
        return item

    def get(self, owner_id: str, item_id: str) -> TodoItem:
        with self._lock:
            return self._owned(owner_id, item_id)

    def update(
        self,
        owner_id: str,
        item_id: str,
        *,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> TodoItem:
        changes: Dict[str, object] = {}
        if text is not None:
            changes["text"] = text
        if completed is not None:
            changes["completed"] = completed

        with self._lock:
            updated = self._owned(owner_id, item_id).model_copy(update=changes)
            self._items[item_id] = updated
        return updated

    def delete(self, owner_id: str, item_id: str) -> None:
        with self._lock:
            self._owned(owner_id, item_id)
            del self._items[item_id]


__all__ = ["TodoNotFoundError", "TodoStore"]
