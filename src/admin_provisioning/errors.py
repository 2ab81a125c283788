"""Error types for user provisioning.

Two families live here:

- Provider failures (IdentityServiceFailure, DataServiceFailure) carry the
  raw error reported by an external service.
- Provisioning errors (ProvisioningError subclasses) are the classified,
  user-facing outcome. Each one knows its HTTP status and turns into a
  ProvisionResult at the request boundary.
"""

from typing import Any

from .models.result import ProvisionResult


# ==================== PROVIDER FAILURES ====================


class IdentityServiceFailure(Exception):
    """Error reported by the identity service when creating an identity."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status,
            "code": self.code,
        }


class DataServiceFailure(Exception):
    """Error reported by the data service when updating a profile row."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
        status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status = status

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
            "status": self.status,
        }


# ==================== CLASSIFIED ERRORS ====================


class ProvisioningError(Exception):
    """Base class for classified provisioning errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_result(self) -> ProvisionResult:
        return ProvisionResult(
            success=False,
            status_code=self.status_code,
            error_type=type(self).__name__,
            error_message=self.message,
            details=self.details,
        )


class ConfigurationError(ProvisioningError):
    """Supabase credentials are missing; every request is rejected."""

    status_code = 500


class ValidationError(ProvisioningError):
    """Malformed or incomplete request payload."""

    status_code = 400


class DuplicateEmailError(ProvisioningError):
    """An identity with this email already exists."""

    status_code = 409


class WeakPasswordError(ProvisioningError):
    """Password rejected by the identity service's length policy."""

    status_code = 400


class IdentityServiceError(ProvisioningError):
    """Any other identity service failure."""

    status_code = 400


class InternalInconsistencyError(ProvisioningError):
    """Identity service reported success but returned no user object."""

    status_code = 500


class ProfileConflictError(ProvisioningError):
    """Username or email already taken in the profiles table."""

    status_code = 409


class ProfileUpdateError(ProvisioningError):
    """Any other profile update failure."""

    status_code = 500


class InternalError(ProvisioningError):
    """Unexpected failure caught at the request boundary."""

    status_code = 500
