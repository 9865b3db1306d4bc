"""Expose constructed client wrappers."""

from .google_auth import (
    GoogleOAuthClient,
    OAuthStateEncoder,
    OAuthStateError,
    OAuthTokenExchangeError,
)

__all__ = [
    "GoogleOAuthClient",
    "OAuthStateEncoder",
    "OAuthStateError",
    "OAuthTokenExchangeError",
]
