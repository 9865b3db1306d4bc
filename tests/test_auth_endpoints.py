try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from todo_service.main import app
from todo_service.schemas import ProviderProfile
from todo_service.services import SessionTokenService, UserDirectory

pytestmark = pytest.mark.anyio

CLIENT_ORIGIN = "https://app.example.com"
SECRET = "endpoint-test-secret-that-is-long-enough-256"


class DummyOAuthClient:
    def __init__(self) -> None:
        self.states: list[str] = []
        self.codes: list[str] = []
        self.profile: ProviderProfile | None = ProviderProfile(
            sub="g-123", email="a@x.com", name="Alice", picture="https://img/a.png"
        )

    def build_authorization_url(self, state: str) -> str:
        self.states.append(state)
        return f"https://oauth.example.com/auth?client_id=test-client-id&state={state}"

    async def exchange_code_for_profile(self, code: str) -> ProviderProfile | None:
        self.codes.append(code)
        return self.profile


@pytest.fixture()
def auth_overrides():
    from todo_service import dependencies
    from todo_service.core.config import get_settings

    dummy_client = DummyOAuthClient()
    directory = UserDirectory()
    tokens = SessionTokenService(secret=SECRET, ttl_seconds=3600)
    settings = get_settings().model_copy(deep=True)
    settings.client_origin = CLIENT_ORIGIN

    app.dependency_overrides.update(
        {
            dependencies.get_google_oauth_client: lambda: dummy_client,
            dependencies.get_user_directory: lambda: directory,
            dependencies.get_session_token_service: lambda: tokens,
            dependencies.get_app_settings: lambda: settings,
        }
    )

    yield dummy_client, directory, tokens

    app.dependency_overrides.clear()


def _api_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    )


def _login_params(response: httpx.Response) -> dict[str, list[str]]:
    assert response.status_code == 307
    location = urlparse(response.headers["location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == f"{CLIENT_ORIGIN}/login"
    return parse_qs(location.query)


async def _sign_in(client: httpx.AsyncClient, dummy_client: DummyOAuthClient) -> str:
    await client.get("/auth/login")
    response = await client.get(
        "/auth/callback",
        params={"code": "oauth-code", "state": dummy_client.states[-1]},
    )
    return _login_params(response)["token"][0]


async def test_health_endpoint() -> None:
    async with _api_client() as client:
        response = await client.get("/api/health")

    assert response.json() == {"status": "ok"}


async def test_login_redirects_to_provider(auth_overrides) -> None:
    dummy_client, _, _ = auth_overrides

    async with _api_client() as client:
        response = await client.get("/auth/login")

    assert response.status_code == 307
    assert response.headers["location"].startswith("https://oauth.example.com/auth")
    assert dummy_client.states


async def test_callback_then_me_returns_profile(auth_overrides) -> None:
    dummy_client, directory, tokens = auth_overrides

    async with _api_client() as client:
        token = await _sign_in(client, dummy_client)
        response = await client.get(
            "/auth/me", headers={"Authorization": f"Bearer {token}"}
        )

    user = directory.get_by_subject("g-123")
    assert response.status_code == 200
    assert response.json() == {
        "id": user.id,
        "email": "a@x.com",
        "name": "Alice",
        "picture": "https://img/a.png",
    }
    assert tokens.verify(token).user_id == user.id
    assert dummy_client.codes == ["oauth-code"]


async def test_second_login_resolves_to_same_user(auth_overrides) -> None:
    dummy_client, directory, tokens = auth_overrides

    async with _api_client() as client:
        first = await _sign_in(client, dummy_client)
        second = await _sign_in(client, dummy_client)

    assert tokens.verify(first).user_id == tokens.verify(second).user_id
    assert len(directory) == 1


async def test_callback_without_profile_redirects_with_no_user(auth_overrides) -> None:
    dummy_client, directory, _ = auth_overrides
    dummy_client.profile = None

    async with _api_client() as client:
        await client.get("/auth/login")
        response = await client.get(
            "/auth/callback",
            params={"code": "oauth-code", "state": dummy_client.states[-1]},
        )

    assert _login_params(response) == {"error": ["no_user"]}
    assert len(directory) == 0


async def test_callback_with_provider_error_redirects_with_no_user(auth_overrides) -> None:
    async with _api_client() as client:
        response = await client.get("/auth/callback", params={"error": "access_denied"})

    assert _login_params(response) == {"error": ["no_user"]}


async def test_me_requires_authorization_header(auth_overrides) -> None:
    async with _api_client() as client:
        response = await client.get("/auth/me")

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_me_rejects_garbage_token(auth_overrides) -> None:
    async with _api_client() as client:
        response = await client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 403
    assert response.json() == {"detail": "Invalid token."}


async def test_me_returns_404_for_unknown_user(auth_overrides) -> None:
    _, _, tokens = auth_overrides

    async with _api_client() as client:
        response = await client.get(
            "/auth/me",
            headers={"Authorization": f"Bearer {tokens.issue('ghost')}"},
        )

    assert response.status_code == 404
