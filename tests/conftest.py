"""Pytest configuration shared across the suite."""

import _bootstrap  # noqa: F401

import pytest


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture
def provider_profile():
    """Profile assertion for the user most scenarios sign in as."""
    from todo_service.schemas import ProviderProfile

    return ProviderProfile(sub="g-123", email="a@x.com", name="Alice")
