"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from .config import ProvisioningSettings
from .middleware import CallerAuthMiddleware, CORSHeadersMiddleware
from .providers import (
    BaseIdentityProvider,
    BaseProfileStore,
    InMemoryIdentityProvider,
    InMemoryProfileStore,
    SupabaseIdentityProvider,
    SupabaseProfileStore,
)
from .provisioner import UserProvisioner
from .routes import create_router


def build_providers(
    settings: ProvisioningSettings,
) -> tuple[BaseIdentityProvider, BaseProfileStore]:
    """
    Build the identity provider and profile store selected by settings.

    Args:
        settings: Provisioning settings

    Returns:
        (identity_provider, profile_store): in-memory pair when mock_enabled,
        Supabase pair otherwise
    """
    if settings.mock_enabled:
        profile_store = InMemoryProfileStore(settings)
        return InMemoryIdentityProvider(settings, profile_store=profile_store), profile_store

    return SupabaseIdentityProvider(settings), SupabaseProfileStore(settings)


def create_app(
    settings: ProvisioningSettings | None = None,
    identity_provider: BaseIdentityProvider | None = None,
    profile_store: BaseProfileStore | None = None,
    logger=None,
) -> FastAPI:
    """
    Create the provisioning application.

    Missing Supabase credentials do not prevent startup: they are logged
    once here, and every POST is answered with a configuration error.

    Args:
        settings: Provisioning settings (read from the environment if omitted)
        identity_provider: Override the identity provider
        profile_store: Override the profile store
        logger: Optional structlog logger

    Returns:
        Configured FastAPI application

    Example:
        app = create_app(ProvisioningSettings.with_prefix("CONSOLE_PROVISIONING_"))
    """
    settings = settings or ProvisioningSettings()
    logger = logger or structlog.get_logger(__name__)

    if identity_provider is None or profile_store is None:
        default_identity, default_store = build_providers(settings)
        identity_provider = identity_provider or default_identity
        profile_store = profile_store or default_store

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        missing = settings.missing_credentials()
        if missing:
            logger.critical(
                "Missing Supabase credentials; provisioning requests will be rejected",
                missing=missing,
            )
        for error in settings.validate_caller_config():
            logger.critical("Invalid caller verification config", error=error)
        if settings.mock_enabled:
            logger.warning("Mock providers enabled; nothing is written to Supabase")

        yield

        await identity_provider.aclose()
        await profile_store.aclose()

    app = FastAPI(title="Admin user provisioning", lifespan=lifespan)
    app.state.settings = settings
    app.state.provisioner = UserProvisioner(
        identity_provider=identity_provider,
        profile_store=profile_store,
        settings=settings,
        logger=logger,
    )

    app.include_router(create_router(settings))

    # Last added runs first: CORS wraps caller auth so 401s carry CORS headers
    app.add_middleware(CallerAuthMiddleware, settings=settings, logger=logger)
    app.add_middleware(CORSHeadersMiddleware, settings=settings)

    return app
