from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from todo_service.schemas import ProviderProfile
from todo_service.services.user_directory import UserDirectory, UserNotFoundError


def test_repeat_login_resolves_to_same_user(provider_profile: ProviderProfile) -> None:
    directory = UserDirectory()

    first = directory.find_or_create("g-123", provider_profile)
    second = directory.find_or_create("g-123", provider_profile)

    assert first.id == second.id
    assert len(directory) == 1
    assert first.email == "a@x.com"
    assert first.name == "Alice"


def test_distinct_subjects_get_distinct_users(provider_profile: ProviderProfile) -> None:
    directory = UserDirectory()
    bob = ProviderProfile(sub="g-456", email="b@x.com", name="Bob")

    alice_user = directory.find_or_create("g-123", provider_profile)
    bob_user = directory.find_or_create("g-456", bob)

    assert alice_user.id != bob_user.id
    assert directory.get_by_subject("g-456") == bob_user
    assert len(directory) == 2


def test_stored_profile_is_not_overwritten_on_relogin(provider_profile: ProviderProfile) -> None:
    directory = UserDirectory()
    original = directory.find_or_create("g-123", provider_profile)

    renamed = ProviderProfile(sub="g-123", email="new@x.com", name="Alicia")
    again = directory.find_or_create("g-123", renamed)

    assert again.id == original.id
    assert directory.get_by_id(original.id).name == "Alice"
    assert directory.get_by_id(original.id).email == "a@x.com"


def test_get_by_id_reports_missing_user() -> None:
    directory = UserDirectory()

    with pytest.raises(UserNotFoundError):
        directory.get_by_id("does-not-exist")
    assert directory.get_by_subject("nobody") is None


def test_blank_subject_is_rejected(provider_profile: ProviderProfile) -> None:
    with pytest.raises(ValueError):
        UserDirectory().find_or_create("", provider_profile)


def test_concurrent_first_logins_create_exactly_one_user(
    provider_profile: ProviderProfile,
) -> None:
    directory = UserDirectory()
    callers = 16
    barrier = threading.Barrier(callers)

    def login(_: int) -> str:
        barrier.wait()
        return directory.find_or_create("g-123", provider_profile).id

    with ThreadPoolExecutor(max_workers=callers) as pool:
        ids = list(pool.map(login, range(callers)))

    assert len(set(ids)) == 1
    assert len(directory) == 1
    assert directory.get_by_subject("g-123").id == ids[0]
