"""
FastAPI routes for the todo service.

``auth_router`` is mounted at the application root; ``router`` carries the
todo endpoints and is mounted under ``/api``.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse

from todo_service.dependencies import CurrentUser, get_identity_adapter, get_todo_store
from todo_service.schemas import (
    TodoCreateRequest,
    TodoResponse,
    TodoUpdateRequest,
    UserProfileResponse,
)
from todo_service.services import TodoNotFoundError

auth_router = APIRouter(prefix="/auth", tags=["auth"])
router = APIRouter(tags=["todos"])
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@auth_router.get("/login")
async def begin_login(
    adapter: Annotated[Any, Depends(get_identity_adapter)],
) -> RedirectResponse:
    """Send the browser to the provider consent screen."""
    return RedirectResponse(
        url=adapter.begin_login(), status_code=HTTPStatus.TEMPORARY_REDIRECT
    )


@auth_router.get("/callback")
async def handle_login_callback(
    adapter: Annotated[Any, Depends(get_identity_adapter)],
    code: str | None = Query(default=None, description="Authorization code."),
    state: str | None = Query(default=None, description="OAuth state token."),
    error: str | None = Query(
        default=None, description="Error reported by the provider, if any."
    ),
) -> RedirectResponse:
    """Complete sign-in and bounce the browser back to the client."""
    redirect_url = await adapter.complete_login(
        code=code, state=state, provider_error=error
    )
    return RedirectResponse(url=redirect_url, status_code=HTTPStatus.TEMPORARY_REDIRECT)


@auth_router.get("/me", response_model=UserProfileResponse)
async def read_current_user(user: CurrentUser) -> UserProfileResponse:
    """Return the authoritative record for the token's user."""
    return UserProfileResponse.from_user(user)


def _todo_not_found() -> HTTPException:
    return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Todo not found.")


@router.get("/todos", response_model=list[TodoResponse])
async def list_todos(
    user: CurrentUser,
    store: Annotated[Any, Depends(get_todo_store)],
) -> list[TodoResponse]:
    return [TodoResponse.from_item(item) for item in store.list_for(user.id)]


@router.post("/todos", response_model=TodoResponse, status_code=HTTPStatus.CREATED)
async def create_todo(
    payload: TodoCreateRequest,
    user: CurrentUser,
    store: Annotated[Any, Depends(get_todo_store)],
) -> TodoResponse:
    item = store.create(user.id, payload.text)
    logger.debug("User %s created todo %s", user.id, item.id)
    return TodoResponse.from_item(item)


@router.get("/todos/{todo_id}", response_model=TodoResponse)
async def read_todo(
    todo_id: str,
    user: CurrentUser,
    store: Annotated[Any, Depends(get_todo_store)],
) -> TodoResponse:
    try:
        return TodoResponse.from_item(store.get(user.id, todo_id))
    except TodoNotFoundError as exc:
        raise _todo_not_found() from exc


@router.put("/todos/{todo_id}", response_model=TodoResponse)
async def update_todo(
    todo_id: str,
    payload: TodoUpdateRequest,
    user: CurrentUser,
    store: Annotated[Any, Depends(get_todo_store)],
) -> TodoResponse:
    """Apply a partial update; the id and owner never change."""
    try:
        item = store.update(
            user.id, todo_id, text=payload.text, completed=payload.completed
        )
    except TodoNotFoundError as exc:
        raise _todo_not_found() from exc
    return TodoResponse.from_item(item)


@router.delete("/todos/{todo_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_todo(
    todo_id: str,
    user: CurrentUser,
    store: Annotated[Any, Depends(get_todo_store)],
) -> Response:
    try:
        store.delete(user.id, todo_id)
    except TodoNotFoundError as exc:
        raise _todo_not_found() from exc
    return Response(status_code=HTTPStatus.NO_CONTENT)


__all__ = ["auth_router", "router"]
