"""
Domain model for locally registered users.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A human who signed in through the identity provider at least once."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Local identifier issued by this service.")
    subject_id: str = Field(
        ..., description="Provider subject identifier used as the login join key."
    )
    email: str = ""
    name: str = ""
    picture: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = ["User"]
