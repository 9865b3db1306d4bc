"""
Authentication dependencies.

Every protected route declares ``get_current_identity`` or
``get_current_user``; the resolved identity is passed to the handler as an
argument rather than stored on the request.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException

from todo_service.dependencies.clients import get_authorization_gate, get_user_directory
from todo_service.models.user import User
from todo_service.services import (
    AuthContext,
    AuthorizationGate,
    ForbiddenError,
    UnauthenticatedError,
    UserDirectory,
    UserNotFoundError,
)


def get_current_identity(
    gate: Annotated[AuthorizationGate, Depends(get_authorization_gate)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> AuthContext:
    """Verify the bearer token, mapping failures to 401/403."""
    try:
        return gate.authorize(authorization)
    except UnauthenticatedError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNAUTHORIZED,
            detail="Not authenticated.",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except ForbiddenError as exc:
        raise HTTPException(
            status_code=HTTPStatus.FORBIDDEN,
            detail="Invalid token.",
        ) from exc


def get_current_user(
    identity: Annotated[AuthContext, Depends(get_current_identity)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> User:
    """Resolve the authenticated identity to its stored user record."""
    try:
        return directory.get_by_id(identity.user_id)
    except UserNotFoundError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND, detail="User not found."
        ) from exc


CurrentIdentity = Annotated[AuthContext, Depends(get_current_identity)]
CurrentUser = Annotated[User, Depends(get_current_user)]

__all__ = [
    "CurrentIdentity",
    "CurrentUser",
    "get_current_identity",
    "get_current_user",
]
