"""Tests for the provisioning HTTP endpoint."""

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from admin_provisioning import (
    DataServiceFailure,
    IdentityServiceFailure,
    InMemoryIdentityProvider,
    InMemoryProfileStore,
    ProvisioningSettings,
    create_app,
)
from admin_provisioning.routes.fastapi import CONFIGURATION_ERROR_MESSAGE

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-headers": "authorization, x-client-info, apikey, content-type",
    "access-control-allow-methods": "POST, OPTIONS",
}


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


@pytest_asyncio.fixture
async def unconfigured_client(unconfigured_settings, identity_provider, profile_store):
    app = create_app(
        unconfigured_settings,
        identity_provider=identity_provider,
        profile_store=profile_store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestPreflight:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/create-user-admin", "/", "/anything"])
    async def test_options_returns_ok_with_cors(self, async_client, path):
        response = await async_client.options(path)

        assert response.status_code == 200
        assert response.text == "ok"
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_options_ignores_missing_configuration(self, unconfigured_client, identity_provider):
        response = await unconfigured_client.options("/create-user-admin")

        assert response.status_code == 200
        assert_cors(response)
        identity_provider.create_identity.assert_not_awaited()


class TestConfiguration:
    @pytest.mark.asyncio
    async def test_missing_credentials_rejects_before_parsing(
        self, unconfigured_client, identity_provider
    ):
        response = await unconfigured_client.post("/create-user-admin", content=b"not json")

        assert response.status_code == 500
        assert response.json() == {"error": CONFIGURATION_ERROR_MESSAGE}
        assert_cors(response)
        identity_provider.create_identity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_app_starts_without_credentials(self, unconfigured_settings, sample_payload):
        app = create_app(unconfigured_settings)

        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 500
        assert response.json()["error"] == CONFIGURATION_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_mock_mode_needs_no_credentials(self, sample_payload):
        settings = ProvisioningSettings(supabase_url="", service_role_key="", mock_enabled=True)
        app = create_app(settings)

        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 201
        assert response.json()["userId"]


class TestProvisioningEndpoint:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/create-user-admin", "/"])
    async def test_success(self, async_client, sample_payload, sample_user_id, path):
        response = await async_client.post(path, json=sample_payload)

        assert response.status_code == 201
        assert response.json() == {
            "message": "User created and profile updated successfully",
            "userId": sample_user_id,
        }
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_invalid_json_returns_400(self, async_client, identity_provider):
        response = await async_client.post(
            "/create-user-admin",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid JSON payload: ")
        identity_provider.create_identity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_fields_returns_400(self, async_client, sample_payload, identity_provider):
        del sample_payload["username"]

        response = await async_client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: email, password, full_name, username, role are required.",
            "details": {"missing": ["username"]},
        }
        identity_provider.create_identity.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_email_returns_409(self, async_client, sample_payload, identity_provider):
        identity_provider.create_identity.side_effect = IdentityServiceFailure(
            "A user with this email address has already been registered",
            status=422,
            code="email_exists",
        )

        response = await async_client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Cette adresse e-mail est déjà utilisée par un autre compte."
        assert body["details"]["code"] == "email_exists"

    @pytest.mark.asyncio
    async def test_profile_conflict_returns_409_with_details(
        self, async_client, sample_payload, profile_store, sample_user_id
    ):
        profile_store.update_profile_by_id.side_effect = DataServiceFailure(
            'duplicate key value violates unique constraint "profiles_username_key"',
            code="23505",
            details="Key (username)=(jane) already exists.",
        )

        response = await async_client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 409
        body = response.json()
        assert "nom d'utilisateur est déjà pris" in body["error"]
        assert body["details"]["user_id"] == sample_user_id
        assert body["details"]["identity_created"] is True

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_500(self, async_client, sample_payload, identity_provider):
        identity_provider.create_identity.side_effect = RuntimeError("boom")

        response = await async_client.post("/create-user-admin", json=sample_payload)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error: boom",
            "details": {"type": "RuntimeError", "message": "boom"},
        }
        assert_cors(response)

    @pytest.mark.asyncio
    async def test_same_request_twice_is_not_idempotent(self, settings, sample_payload):
        store = InMemoryProfileStore(settings)
        app = create_app(
            settings,
            identity_provider=InMemoryIdentityProvider(settings, profile_store=store),
            profile_store=store,
        )
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            first = await client.post("/create-user-admin", json=sample_payload)
            second = await client.post("/create-user-admin", json=sample_payload)

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "Cette adresse e-mail est déjà utilisée par un autre compte."

    @pytest.mark.asyncio
    async def test_custom_route_path(self, identity_provider, profile_store, sample_payload):
        settings = ProvisioningSettings(
            supabase_url="https://project-ref.supabase.co",
            service_role_key="key",
            route_path="/admin/users",
        )
        app = create_app(settings, identity_provider=identity_provider, profile_store=profile_store)
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/admin/users", json=sample_payload)

        assert response.status_code == 201
