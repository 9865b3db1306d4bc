"""Schemas related to sign-in and the authenticated user."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from todo_service.models.user import User


class ProviderProfile(BaseModel):
    """Verified profile assertion returned by the identity provider."""

    model_config = ConfigDict(extra="ignore")

    sub: str = Field(..., min_length=1, description="Provider subject identifier.")
    email: str = ""
    name: str = ""
    picture: Optional[str] = None


class UserProfileResponse(BaseModel):
    """Public view of a local user returned by ``/auth/me``."""

    id: str
    email: str
    name: str
    picture: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserProfileResponse":
        return cls(id=user.id, email=user.email, name=user.name, picture=user.picture)


__all__ = ["ProviderProfile", "UserProfileResponse"]
