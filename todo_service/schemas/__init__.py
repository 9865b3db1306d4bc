"""Public schema exports."""

from .auth import ProviderProfile, UserProfileResponse
from .todo import (
    TODO_TEXT_MAX_LENGTH,
    TodoCreateRequest,
    TodoResponse,
    TodoUpdateRequest,
)

__all__ = [
    "ProviderProfile",
    "TODO_TEXT_MAX_LENGTH",
    "TodoCreateRequest",
    "TodoResponse",
    "TodoUpdateRequest",
    "UserProfileResponse",
]
