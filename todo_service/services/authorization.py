"""Request-level bearer token check."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from todo_service.services.session_tokens import SessionTokenError, SessionTokenService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class UnauthenticatedError(Exception):
    """No credential was presented."""


class ForbiddenError(Exception):
    """A credential was presented but is not acceptable."""


@dataclass(frozen=True, slots=True)
class AuthContext:
    """Identity resolved for a single request."""

    user_id: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class AuthorizationGate:
    """Turn a raw ``Authorization`` header into an ``AuthContext``."""

    def __init__(self, token_service: SessionTokenService) -> None:
        self._tokens = token_service

    def authorize(self, header_value: Optional[str]) -> AuthContext:
        if header_value is None or not header_value.strip():
            raise UnauthenticatedError("Missing bearer token.")

        scheme, _, credentials = header_value.strip().partition(" ")
        token = credentials.strip()
        if scheme.lower() != BEARER_SCHEME or not token:
            logger.debug("Rejected credential with unsupported scheme")
            raise ForbiddenError("Invalid bearer token.")

        try:
            payload = self._tokens.verify(token)
        except SessionTokenError as exc:
            # Callers only ever see the generic message.
            logger.debug("Rejected bearer token: %s", exc.__class__.__name__)
            raise ForbiddenError("Invalid bearer token.") from exc

        return AuthContext(
            user_id=payload.user_id,
            issued_at=payload.issued_at,
            expires_at=payload.expires_at,
        )


__all__ = [
    "AuthContext",
    "AuthorizationGate",
    "ForbiddenError",
    "UnauthenticatedError",
]
