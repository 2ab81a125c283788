"""User provisioning orchestration.

Provisioning is two strictly ordered calls:
1. Create the auth identity (email unconfirmed)
2. Update the profile row created for that identity by the database trigger

The profile update is only attempted once the identity exists. If it
fails, the identity is left in place and the result says so: no rollback
is performed.
"""

from collections.abc import Mapping
from typing import Any

import pydantic
import structlog

from .config import ProvisioningSettings
from .errors import (
    DataServiceFailure,
    IdentityServiceFailure,
    InternalError,
    InternalInconsistencyError,
    ProvisioningError,
    ValidationError,
)
from .models import (
    REQUIRED_FIELDS,
    AuthIdentity,
    ProfileRole,
    ProfileUpdate,
    ProvisionRequest,
    ProvisionResult,
)
from .providers import BaseIdentityProvider, BaseProfileStore
from .utils.classification import classify_identity_error, classify_profile_error

MISSING_FIELDS_MESSAGE = (
    f"Missing required fields: {', '.join(REQUIRED_FIELDS)} are required."
)
INVALID_TYPES_MESSAGE = (
    f"Invalid payload: {', '.join(REQUIRED_FIELDS)} must be strings."
)


class UserProvisioner:
    """
    Creates an auth identity and fills in its profile row.

    provision() never raises: every failure, expected or not, comes back as
    a classified ProvisionResult.

    Example usage:
        provisioner = UserProvisioner(
            identity_provider=SupabaseIdentityProvider(settings),
            profile_store=SupabaseProfileStore(settings),
            settings=settings,
        )

        result = await provisioner.provision(
            {
                "email": "jane@example.com",
                "password": "s3cret-pass",
                "full_name": "Jane Doe",
                "username": "jane",
                "role": "moderator",
            }
        )
        result.status_code  # 201
        result.user_id      # ID issued by the identity service
    """

    def __init__(
        self,
        identity_provider: BaseIdentityProvider,
        profile_store: BaseProfileStore,
        settings: ProvisioningSettings,
        logger=None,
    ):
        """
        Initialize the provisioner.

        Args:
            identity_provider: Service creating auth identities
            profile_store: Service updating profile rows
            settings: Provisioning settings
            logger: Optional structlog logger (module logger by default)
        """
        self.identity_provider = identity_provider
        self.profile_store = profile_store
        self.settings = settings
        self.logger = logger or structlog.get_logger(__name__)

    async def provision(self, request: ProvisionRequest | Mapping[str, Any]) -> ProvisionResult:
        """
        Provision a user.

        Args:
            request: Parsed request or raw JSON object from the admin console

        Returns:
            ProvisionResult: 201 with the new user ID, or a classified error
        """
        try:
            payload = self._validate(request)
            identity = await self._create_identity(payload)
            await self._update_profile(identity, payload)

        except ProvisioningError as e:
            return e.to_result()

        except Exception as e:
            self.logger.exception(
                "Unexpected provisioning error",
                error_type=type(e).__name__,
                error=str(e),
            )
            return InternalError(
                f"Internal server error: {e}",
                details={"type": type(e).__name__, "message": str(e)},
            ).to_result()

        self.logger.info("User provisioned", user_id=identity.id, email=payload.email)
        return ProvisionResult.created(identity.id)

    # ==================== STEPS ====================

    def _validate(self, request: ProvisionRequest | Mapping[str, Any]) -> ProvisionRequest:
        """
        Check that all required fields are present and the role is known.

        Presence is checked on the raw payload first, so a missing field is
        reported even when another field has the wrong type.

        Raises:
            ValidationError: On any missing field, non-string field or unknown role
        """
        if isinstance(request, ProvisionRequest):
            data = request.model_dump()
        elif isinstance(request, Mapping):
            data = dict(request)
        else:
            raise ValidationError("Invalid JSON payload: expected a JSON object.")

        missing = [name for name in REQUIRED_FIELDS if not data.get(name)]
        if missing:
            self.logger.warning("Missing required fields", missing=missing, email=data.get("email"))
            raise ValidationError(MISSING_FIELDS_MESSAGE, details={"missing": missing})

        try:
            payload = ProvisionRequest.model_validate(data)
        except pydantic.ValidationError as e:
            self.logger.warning("Invalid provisioning payload", errors=e.error_count())
            raise ValidationError(
                INVALID_TYPES_MESSAGE,
                details={
                    "errors": e.errors(
                        include_url=False, include_context=False, include_input=False
                    )
                },
            ) from e

        allowed = [role.value for role in ProfileRole]
        if payload.role not in allowed:
            self.logger.warning("Unknown role", role=payload.role)
            raise ValidationError(
                f"Invalid role '{payload.role}': expected one of {', '.join(allowed)}.",
                details={"role": payload.role, "allowed": allowed},
            )

        return payload

    async def _create_identity(self, payload: ProvisionRequest) -> AuthIdentity:
        """
        Create the auth identity with email confirmation suppressed.

        Raises:
            DuplicateEmailError, WeakPasswordError, IdentityServiceError:
                If the identity service rejects the request
            InternalInconsistencyError: If no user object came back
        """
        self.logger.info("Creating auth identity", email=payload.email)

        try:
            identity = await self.identity_provider.create_identity(
                payload.email,
                payload.password,
                confirm_email=False,
            )
        except IdentityServiceFailure as e:
            error = classify_identity_error(e)
            self.logger.error(
                "Identity creation failed",
                email=payload.email,
                provider_message=e.message,
                provider_status=e.status,
                provider_code=e.code,
                error_type=type(error).__name__,
                status_code=error.status_code,
            )
            raise error from e

        if identity is None:
            self.logger.error("Identity creation returned no user object", email=payload.email)
            raise InternalInconsistencyError(
                "User creation failed: No user object returned from auth."
            )

        self.logger.info("Auth identity created", user_id=identity.id)
        return identity

    async def _update_profile(self, identity: AuthIdentity, payload: ProvisionRequest) -> None:
        """
        Write name, username, role and approved status to the profile row.

        Raises:
            ProfileConflictError, ProfileUpdateError: If the data service rejects the update
        """
        update = ProfileUpdate(
            full_name=payload.full_name,
            username=payload.username,
            role=payload.role,
            status=self.settings.approved_status,
        )

        try:
            await self.profile_store.update_profile_by_id(identity.id, update)
        except DataServiceFailure as e:
            error = classify_profile_error(
                e,
                user_id=identity.id,
                message_fallback=self.settings.message_fallback_enabled,
            )
            # Partial failure: the identity exists without an approved profile
            self.logger.error(
                "Profile update failed after identity creation",
                user_id=identity.id,
                provider_code=e.code,
                provider_message=e.message,
                provider_details=e.details,
                provider_hint=e.hint,
                error_type=type(error).__name__,
                status_code=error.status_code,
            )
            raise error from e

        self.logger.info("Profile updated", user_id=identity.id, role=payload.role)
