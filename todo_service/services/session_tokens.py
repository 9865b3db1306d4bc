"""Issue and verify the signed bearer tokens handed to the browser client."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidAlgorithmError,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)

USER_ID_CLAIM = "userId"


class SessionTokenError(Exception):
    """Base class for verification failures."""


class MalformedTokenError(SessionTokenError):
    """The token cannot be parsed into a signed header.payload.signature."""


class InvalidSignatureError(SessionTokenError):
    """The signature does not match the payload under the server secret."""


class ExpiredTokenError(SessionTokenError):
    """The token was valid but its expiry has passed."""


class TokenIssuanceError(Exception):
    """Raised when a token cannot be signed."""


@dataclass(frozen=True, slots=True)
class TokenPayload:
    """Claims recovered from a verified session token."""

    user_id: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


def _timestamp(claims: dict[str, Any], name: str) -> Optional[datetime]:
    value = claims.get(name)
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


class SessionTokenService:
    """Stateless HMAC-signed JWT issuer and verifier."""

    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        ttl_seconds: int = 0,
    ) -> None:
        if not secret:
            raise ValueError("Session token secret must be provided.")
        if not algorithm.startswith("HS"):
            raise ValueError("Only HMAC algorithms are supported for session tokens.")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = timedelta(seconds=ttl_seconds) if ttl_seconds else None

    def issue(self, user_id: str, *, now: Optional[datetime] = None) -> str:
        """Sign a token asserting ``user_id``."""
        issued_at = now or datetime.now(timezone.utc)
        claims: dict[str, Any] = {USER_ID_CLAIM: user_id, "iat": issued_at}
        if self._ttl is not None:
            claims["exp"] = issued_at + self._ttl
        try:
            return jwt.encode(claims, self._secret, algorithm=self._algorithm)
        except (InvalidTokenError, NotImplementedError, TypeError, ValueError) as exc:
            raise TokenIssuanceError("Failed to sign session token.") from exc

    def verify(self, token: str) -> TokenPayload:
        """Check the signature (and expiry) and return the decoded payload."""
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": [USER_ID_CLAIM, "iat"]},
            )
        except ExpiredSignatureError as exc:
            raise ExpiredTokenError("Session token has expired.") from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignatureError("Session token signature mismatch.") from exc
        except InvalidAlgorithmError as exc:
            raise InvalidSignatureError("Session token uses a disallowed algorithm.") from exc
        except DecodeError as exc:
            raise MalformedTokenError("Session token could not be decoded.") from exc
        except InvalidTokenError as exc:
            raise MalformedTokenError("Session token claims are invalid.") from exc

        user_id = claims.get(USER_ID_CLAIM)
        if not isinstance(user_id, str) or not user_id:
            raise MalformedTokenError("Session token does not name a user.")

        return TokenPayload(
            user_id=user_id,
            issued_at=_timestamp(claims, "iat"),
            expires_at=_timestamp(claims, "exp"),
        )


__all__ = [
    "ExpiredTokenError",
    "InvalidSignatureError",
    "MalformedTokenError",
    "SessionTokenError",
    "SessionTokenService",
    "TokenIssuanceError",
    "TokenPayload",
    "USER_ID_CLAIM",
]
