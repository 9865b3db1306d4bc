"""Service layer exports."""

from .authorization import (
    AuthContext,
    AuthorizationGate,
    ForbiddenError,
    UnauthenticatedError,
)
from .identity import IdentityProviderAdapter, LoginErrorCode, ProviderAssertionMissing
from .session_tokens import (
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
    SessionTokenError,
    SessionTokenService,
    TokenIssuanceError,
    TokenPayload,
)
from .todo_store import TodoNotFoundError, TodoStore
from .user_directory import UserDirectory, UserNotFoundError

__all__ = [
    "AuthContext",
    "AuthorizationGate",
    "ExpiredTokenError",
    "ForbiddenError",
    "IdentityProviderAdapter",
    "InvalidSignatureError",
    "LoginErrorCode",
    "MalformedTokenError",
    "ProviderAssertionMissing",
    "SessionTokenError",
    "SessionTokenService",
    "TodoNotFoundError",
    "TodoStore",
    "TokenIssuanceError",
    "TokenPayload",
    "UnauthenticatedError",
    "UserDirectory",
    "UserNotFoundError",
]
