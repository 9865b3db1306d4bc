"""
Sign-in orchestration between the identity provider and local users.

The provider client proves who the user is; this module maps that proof onto
a local user, issues a session token and decides where the browser goes next.
Every failure ends in a redirect to the client's login page carrying one of
the codes in ``LoginErrorCode``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from todo_service.clients.google_auth import (
    GoogleOAuthClient,
    OAuthStateEncoder,
    OAuthStateError,
    OAuthTokenExchangeError,
)
from todo_service.models.user import User
from todo_service.schemas.auth import ProviderProfile
from todo_service.services.session_tokens import SessionTokenService, TokenIssuanceError
from todo_service.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


class LoginErrorCode(str, Enum):
    NO_USER = "no_user"
    TOKEN_ERROR = "token_error"


class ProviderAssertionMissing(Exception):
    """The callback completed without a usable provider profile."""


class IdentityProviderAdapter:
    """Drive the OAuth authorization-code flow for browser sign-in."""

    LOGIN_PATH = "/login"

    def __init__(
        self,
        *,
        oauth_client: GoogleOAuthClient,
        state_encoder: OAuthStateEncoder,
        directory: UserDirectory,
        token_service: SessionTokenService,
        client_origin: str,
        state_ttl_seconds: int = 900,
    ) -> None:
        self._oauth = oauth_client
        self._state = state_encoder
        self._directory = directory
        self._tokens = token_service
        self._client_origin = client_origin.rstrip("/")
        self._state_ttl = timedelta(seconds=state_ttl_seconds)

    def begin_login(self) -> str:
        """Return the provider consent URL the browser should be sent to."""
        state = self._state.encode(
            {
                "nonce": uuid.uuid4().hex,
                "issued_at": datetime.now(timezone.utc).isoformat(),
            }
        )
        return self._oauth.build_authorization_url(state=state)

    async def complete_login(
        self,
        *,
        code: Optional[str],
        state: Optional[str],
        provider_error: Optional[str] = None,
    ) -> str:
        """Finish the provider round trip and return the client redirect URL."""
        if provider_error:
            logger.warning("Provider reported sign-in error: %s", provider_error)
            return self.login_redirect(error=LoginErrorCode.NO_USER)
        if not code or not state:
            logger.warning("OAuth callback is missing code or state")
            return self.login_redirect(error=LoginErrorCode.NO_USER)

        try:
            self._check_state(state)
        except OAuthStateError as exc:
            logger.warning("Rejected OAuth state: %s", exc)
            return self.login_redirect(error=LoginErrorCode.NO_USER)

        try:
            profile = await self._oauth.exchange_code_for_profile(code)
        except OAuthTokenExchangeError as exc:
            logger.warning("OAuth code exchange failed: %s", exc)
            return self.login_redirect(error=LoginErrorCode.TOKEN_ERROR)

        return self.handle_callback(profile)

    def handle_callback(self, profile: Optional[ProviderProfile]) -> str:
        """Resolve ``profile`` to a local user and redirect with a fresh token."""
        try:
            user = self.resolve_local_user(profile)
        except ProviderAssertionMissing:
            logger.warning("OAuth callback completed without a provider profile")
            return self.login_redirect(error=LoginErrorCode.NO_USER)

        try:
            token = self._tokens.issue(user.id)
        except TokenIssuanceError:
            logger.exception("Failed to issue session token for user %s", user.id)
            return self.login_redirect(error=LoginErrorCode.TOKEN_ERROR)

        logger.info("User %s signed in", user.id)
        return self.login_redirect(token=token)

    def resolve_local_user(self, profile: Optional[ProviderProfile]) -> User:
        if profile is None or not profile.sub:
            raise ProviderAssertionMissing("No provider profile was supplied.")
        return self._directory.find_or_create(profile.sub, profile)

    def login_redirect(
        self,
        *,
        token: Optional[str] = None,
        error: Optional[LoginErrorCode] = None,
    ) -> str:
        if error is not None:
            query = urlencode({"error": error.value})
        else:
            query = urlencode({"token": token})
        return f"{self._client_origin}{self.LOGIN_PATH}?{query}"

    def _check_state(self, state: str) -> None:
        payload = self._state.decode(state)
        issued_at_raw = payload.get("issued_at")
        if not isinstance(issued_at_raw, str):
            raise OAuthStateError("Missing issued_at in state token.")
        try:
            issued_at = datetime.fromisoformat(issued_at_raw)
        except ValueError as exc:
            raise OAuthStateError("Invalid issued_at in state token.") from exc
        if issued_at.tzinfo is None:
            issued_at = issued_at.replace(tzinfo=timezone.utc)
        if datetime.now(timezone.utc) - issued_at > self._state_ttl:
            raise OAuthStateError("OAuth state token has expired.")


__all__ = [
    "IdentityProviderAdapter",
    "LoginErrorCode",
    "ProviderAssertionMissing",
]
