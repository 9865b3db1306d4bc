"""
Google OAuth utilities.

These helpers build the consent redirect and exchange an authorization code
for the signed-in user's profile.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import json
import logging
from hashlib import sha256
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from todo_service.core.config import GoogleSettings, OAuthSettings
from todo_service.schemas.auth import ProviderProfile

logger = logging.getLogger(__name__)


class OAuthStateError(Exception):
    """Raised when an OAuth state value fails signature or format checks."""


class OAuthStateEncoder:
    """Encode and decode OAuth state values to guard against tampering."""

    _SIGNATURE_SIZE = 32

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key.encode("utf-8")

    def encode(self, payload: Dict[str, Any]) -> str:
        serialized = json.dumps(payload, separators=(",", ":"), sort_keys=True)
        signature = hmac.new(self._secret_key, serialized.encode("utf-8"), sha256).digest()
        return base64.urlsafe_b64encode(signature + serialized.encode("utf-8")).decode("utf-8")

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            decoded = base64.urlsafe_b64decode(token.encode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise OAuthStateError("OAuth state is not valid base64.") from exc

        signature = decoded[: self._SIGNATURE_SIZE]
        serialized = decoded[self._SIGNATURE_SIZE :]
        expected_signature = hmac.new(self._secret_key, serialized, sha256).digest()
        if not hmac.compare_digest(signature, expected_signature):
            raise OAuthStateError("Invalid OAuth state signature.")

        try:
            payload = json.loads(serialized)
        except ValueError as exc:
            raise OAuthStateError("OAuth state payload is not JSON.") from exc
        if not isinstance(payload, dict):
            raise OAuthStateError("OAuth state payload must be an object.")
        return payload


class OAuthTokenExchangeError(Exception):
    """Raised when the provider cannot complete the code exchange."""


class GoogleOAuthClient:
    """Build Google authorization URLs and exchange codes for user profiles."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._transport = transport

    def build_authorization_url(self, state: str) -> str:
        """Construct the Google OAuth consent URL."""
        params = {
            "client_id": self._google.client_id,
            "redirect_uri": str(self._google.redirect_uri),
            "response_type": "code",
            "scope": " ".join(self._oauth.scopes),
            "include_granted_scopes": "true",
            "state": state,
        }
        query = urlencode(params)
        return f"{self.AUTH_BASE_URL}?{query}"

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._oauth.provider_timeout_seconds,
            transport=self._transport,
        )

    async def exchange_code_for_profile(self, code: str) -> Optional[ProviderProfile]:
        """
        Exchange an authorization code for the user's profile assertion.

        Returns ``None`` when the provider answers but does not identify a
        subject. Transport failures, timeouts and error responses raise
        ``OAuthTokenExchangeError``.
        """
        payload = {
            "code": code,
            "client_id": self._google.client_id,
            "client_secret": self._google.client_secret,
            "redirect_uri": str(self._google.redirect_uri),
            "grant_type": "authorization_code",
        }

        try:
            async with self._http_client() as client:
                token_response = await client.post(self.TOKEN_URL, data=payload)
                if token_response.status_code != httpx.codes.OK:
                    raise OAuthTokenExchangeError(
                        f"Token endpoint returned {token_response.status_code}."
                    )

                token_payload = token_response.json()
                access_token = (
                    token_payload.get("access_token")
                    if isinstance(token_payload, dict)
                    else None
                )
                if not access_token:
                    raise OAuthTokenExchangeError(
                        "Token endpoint response did not include an access token."
                    )

                userinfo_response = await client.get(
                    self.USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except httpx.TimeoutException as exc:
            logger.warning("Timed out talking to the OAuth provider")
            raise OAuthTokenExchangeError("OAuth provider timed out.") from exc
        except httpx.HTTPError as exc:
            logger.warning("OAuth provider request failed: %s", exc.__class__.__name__)
            raise OAuthTokenExchangeError("OAuth provider request failed.") from exc
        except ValueError as exc:
            raise OAuthTokenExchangeError("Token endpoint returned invalid JSON.") from exc

        if userinfo_response.status_code != httpx.codes.OK:
            raise OAuthTokenExchangeError(
                f"Userinfo endpoint returned {userinfo_response.status_code}."
            )

        try:
            claims = userinfo_response.json()
        except ValueError as exc:
            raise OAuthTokenExchangeError("Userinfo endpoint returned invalid JSON.") from exc

        if not isinstance(claims, dict) or not claims.get("sub"):
            return None
        try:
            return ProviderProfile.model_validate(claims)
        except ValidationError:
            logger.warning("Discarding malformed userinfo payload from provider")
            return None


__all__ = [
    "GoogleOAuthClient",
    "OAuthStateEncoder",
    "OAuthStateError",
    "OAuthTokenExchangeError",
]
