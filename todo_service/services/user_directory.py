"""Process-local registry of users keyed by provider subject and local id."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional
from uuid import uuid4

from todo_service.models.user import User
from todo_service.schemas.auth import ProviderProfile

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """Raised when a local user identifier does not resolve."""


class UserDirectory:
    """In-memory user store safe to share across concurrent requests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: Dict[str, User] = {}
        self._by_subject: Dict[str, str] = {}

    def find_or_create(self, subject_id: str, profile: ProviderProfile) -> User:
        """
        Return the user registered for ``subject_id``, creating it on first use.

        The lookup and insert happen under one lock, so concurrent callbacks
        for the same subject all receive the single stored record.
        """
        if not subject_id:
            raise ValueError("A provider subject identifier is required.")

        with self._lock:
            user_id = self._by_subject.get(subject_id)
            if user_id is not None:
                existing = self._by_id[user_id]
                if (existing.email, existing.name, existing.picture) != (
                    profile.email,
                    profile.name,
                    profile.picture,
                ):
                    logger.debug(
                        "Profile for user %s changed at provider; keeping stored record",
                        existing.id,
                    )
                return existing

            user = User(
                id=uuid4().hex,
                subject_id=subject_id,
                email=profile.email,
                name=profile.name,
                picture=profile.picture,
            )
            self._by_id[user.id] = user
            self._by_subject[subject_id] = user.id

        logger.info("Registered new user %s", user.id)
        return user

    def get_by_id(self, user_id: str) -> User:
        with self._lock:
            user = self._by_id.get(user_id)
        if user is None:
            raise UserNotFoundError(f"No user with id {user_id!r}.")
        return user

    def get_by_subject(self, subject_id: str) -> Optional[User]:
        with self._lock:
            user_id = self._by_subject.get(subject_id)
            return self._by_id.get(user_id) if user_id is not None else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)


__all__ = ["UserDirectory", "UserNotFoundError"]
