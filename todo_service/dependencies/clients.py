"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from todo_service.clients import GoogleOAuthClient, OAuthStateEncoder
from todo_service.core.config import AppSettings, get_settings
from todo_service.services import (
    AuthorizationGate,
    IdentityProviderAdapter,
    SessionTokenService,
    TodoStore,
    UserDirectory,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings()


@lru_cache()
def get_oauth_state_encoder() -> OAuthStateEncoder:
    """Provide an OAuth state encoder derived from the Google client secret."""
    settings = _settings()
    return OAuthStateEncoder(secret_key=settings.google.client_secret)


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = _settings()
    return GoogleOAuthClient(settings.google, settings.oauth)


@lru_cache()
def get_session_token_service() -> SessionTokenService:
    """Provide the session token signer shared by every request."""
    security = _settings().security
    return SessionTokenService(
        secret=security.jwt_secret,
        algorithm=security.jwt_algorithm,
        ttl_seconds=security.session_token_ttl_seconds,
    )


@lru_cache()
def get_user_directory() -> UserDirectory:
    """Provide the process-local user directory."""
    return UserDirectory()


@lru_cache()
def get_todo_store() -> TodoStore:
    """Provide the process-local todo store."""
    return TodoStore()


def get_authorization_gate(
    token_service: Annotated[SessionTokenService, Depends(get_session_token_service)],
) -> AuthorizationGate:
    """Build the bearer token gate around the shared token service."""
    return AuthorizationGate(token_service)


def get_identity_adapter(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
    state_encoder: Annotated[OAuthStateEncoder, Depends(get_oauth_state_encoder)],
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
    token_service: Annotated[SessionTokenService, Depends(get_session_token_service)],
) -> IdentityProviderAdapter:
    """Build the sign-in adapter from the shared collaborators."""
    return IdentityProviderAdapter(
        oauth_client=oauth_client,
        state_encoder=state_encoder,
        directory=directory,
        token_service=token_service,
        client_origin=settings.client_origin,
        state_ttl_seconds=settings.oauth.state_ttl_seconds,
    )


__all__ = [
    "get_app_settings",
    "get_authorization_gate",
    "get_google_oauth_client",
    "get_identity_adapter",
    "get_oauth_state_encoder",
    "get_session_token_service",
    "get_todo_store",
    "get_user_directory",
]
