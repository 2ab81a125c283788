"""admin-provisioning: admin endpoint that provisions application users.

This package provides:
- A two-step provisioning flow (auth identity, then profile row)
- Classification of identity and profile failures into HTTP errors
- Supabase auth admin and REST providers, plus in-memory mocks
- A FastAPI application with permissive CORS and optional caller JWT checks
- Configurable environment prefixes
"""

from importlib.metadata import PackageNotFoundError, version

from .app import build_providers, create_app
from .config import ProvisioningSettings
from .errors import (
    ConfigurationError,
    DataServiceFailure,
    DuplicateEmailError,
    IdentityServiceError,
    IdentityServiceFailure,
    InternalError,
    InternalInconsistencyError,
    ProfileConflictError,
    ProfileUpdateError,
    ProvisioningError,
    ValidationError,
    WeakPasswordError,
)
from .logging_config import configure_logging
from .models import AuthIdentity, ProfileRole, ProfileUpdate, ProvisionRequest, ProvisionResult
from .providers import (
    BaseIdentityProvider,
    BaseProfileStore,
    InMemoryIdentityProvider,
    InMemoryProfileStore,
    SupabaseIdentityProvider,
    SupabaseProfileStore,
)
from .provisioner import UserProvisioner

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("admin-provisioning")
except PackageNotFoundError:
    # Package is not installed, fallback for development
    __version__ = "0.0.0+dev"

__all__ = [
    # Configuration
    "ProvisioningSettings",
    "configure_logging",
    # Models
    "ProvisionRequest",
    "ProvisionResult",
    "ProfileRole",
    "ProfileUpdate",
    "AuthIdentity",
    # Errors
    "ProvisioningError",
    "ConfigurationError",
    "ValidationError",
    "DuplicateEmailError",
    "WeakPasswordError",
    "IdentityServiceError",
    "InternalInconsistencyError",
    "ProfileConflictError",
    "ProfileUpdateError",
    "InternalError",
    "IdentityServiceFailure",
    "DataServiceFailure",
    # Providers
    "BaseIdentityProvider",
    "BaseProfileStore",
    "SupabaseIdentityProvider",
    "SupabaseProfileStore",
    "InMemoryIdentityProvider",
    "InMemoryProfileStore",
    # Provisioning
    "UserProvisioner",
    # Application
    "create_app",
    "build_providers",
]
