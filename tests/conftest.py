"""Shared test fixtures and configuration."""

import os
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from admin_provisioning import (
    AuthIdentity,
    BaseIdentityProvider,
    BaseProfileStore,
    InMemoryIdentityProvider,
    InMemoryProfileStore,
    ProvisioningSettings,
    UserProvisioner,
    create_app,
)

SUPABASE_URL = "https://project-ref.supabase.co"
SERVICE_ROLE_KEY = "test-service-role-key"


@pytest.fixture
def settings() -> ProvisioningSettings:
    """Create fully configured test settings."""
    return ProvisioningSettings(
        supabase_url=SUPABASE_URL,
        service_role_key=SERVICE_ROLE_KEY,
        mock_enabled=False,
        verify_caller_jwt=False,
    )


@pytest.fixture
def unconfigured_settings() -> ProvisioningSettings:
    """Create settings with no Supabase credentials."""
    return ProvisioningSettings(
        supabase_url="",
        service_role_key="",
        mock_enabled=False,
        verify_caller_jwt=False,
    )


@pytest.fixture
def sample_user_id() -> str:
    return "7f3c1e2a-9b4d-4c55-8a61-2d0e5b9f1c11"


@pytest.fixture
def sample_payload() -> dict:
    """Create a complete provisioning payload."""
    return {
        "email": "jane.doe@example.com",
        "password": "s3cret-pass",
        "full_name": "Jane Doe",
        "username": "jane",
        "role": "moderator",
    }


@pytest.fixture
def identity_provider(sample_user_id: str) -> MagicMock:
    """Create an identity provider double that succeeds."""
    provider = MagicMock(spec=BaseIdentityProvider)
    provider.create_identity = AsyncMock(
        return_value=AuthIdentity(id=sample_user_id, email="jane.doe@example.com")
    )
    provider.aclose = AsyncMock(return_value=None)
    return provider


@pytest.fixture
def profile_store(sample_user_id: str) -> MagicMock:
    """Create a profile store double that succeeds."""
    store = MagicMock(spec=BaseProfileStore)
    store.update_profile_by_id = AsyncMock(return_value={"id": sample_user_id})
    store.aclose = AsyncMock(return_value=None)
    return store


@pytest.fixture
def provisioner(identity_provider, profile_store, settings) -> UserProvisioner:
    """Create a provisioner wired to the provider doubles."""
    return UserProvisioner(
        identity_provider=identity_provider,
        profile_store=profile_store,
        settings=settings,
    )


@pytest.fixture
def in_memory_store(settings) -> InMemoryProfileStore:
    return InMemoryProfileStore(settings)


@pytest.fixture
def in_memory_identity(settings, in_memory_store) -> InMemoryIdentityProvider:
    return InMemoryIdentityProvider(settings, profile_store=in_memory_store)


@pytest.fixture
def fastapi_app(settings, identity_provider, profile_store) -> FastAPI:
    """Create a test application wired to the provider doubles."""
    return create_app(
        settings,
        identity_provider=identity_provider,
        profile_store=profile_store,
    )


@pytest_asyncio.fixture
async def async_client(fastapi_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
