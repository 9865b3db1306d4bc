"""Expose dependency helpers for FastAPI routers."""

from .auth import CurrentIdentity, CurrentUser, get_current_identity, get_current_user
from .clients import (
    get_app_settings,
    get_authorization_gate,
    get_google_oauth_client,
    get_identity_adapter,
    get_oauth_state_encoder,
    get_session_token_service,
    get_todo_store,
    get_user_directory,
)

__all__ = [
    "CurrentIdentity",
    "CurrentUser",
    "get_app_settings",
    "get_authorization_gate",
    "get_current_identity",
    "get_current_user",
    "get_google_oauth_client",
    "get_identity_adapter",
    "get_oauth_state_encoder",
    "get_session_token_service",
    "get_todo_store",
    "get_user_directory",
]
