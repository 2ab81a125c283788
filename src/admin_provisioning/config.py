"""Provisioning configuration settings."""

from typing import TypeVar

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

T = TypeVar("T", bound="ProvisioningSettings")


class ProvisioningSettings(BaseSettings):
    """
    Settings for the admin user provisioning endpoint.

    Configuration precedence (highest to lowest):
    1. Environment variables ({PREFIX}*)
    2. .env file
    3. Default values

    Example usage:
        # Default (uses PROVISIONING_* environment variables)
        settings = ProvisioningSettings()

        # Per-deployment prefix (uses CONSOLE_PROVISIONING_* variables)
        settings = ProvisioningSettings.with_prefix("CONSOLE_PROVISIONING_")

    Example .env file:
        PROVISIONING_SUPABASE_URL=https://project-ref.supabase.co
        PROVISIONING_SERVICE_ROLE_KEY=your-service-role-key

        # Optional: verify the caller's JWT before provisioning
        PROVISIONING_VERIFY_CALLER_JWT=true
        PROVISIONING_CALLER_JWT_SECRET=your-project-jwt-secret

    Missing credentials do not stop the application from starting: every
    provisioning request is rejected with a configuration error instead.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROVISIONING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== SUPABASE SETTINGS ====================

    supabase_url: str = Field(
        default="",
        description="Base URL of the Supabase project (https://<ref>.supabase.co)",
    )

    service_role_key: str = Field(
        default="",
        description="Service role key used for the auth admin API and the profiles table",
    )

    profiles_table: str = Field(
        default="profiles",
        description="Table holding one profile row per auth identity",
    )

    approved_status: str = Field(
        default="approved",
        description="Status written to the profile row on successful provisioning",
    )

    # ==================== HTTP SETTINGS ====================

    route_path: str = Field(
        default="/create-user-admin",
        description="Path the provisioning endpoint is mounted on (also served on /)",
    )

    cors_allow_origin: str = Field(
        default="*",
        description="Value of Access-Control-Allow-Origin on every response",
    )

    cors_allow_headers: list[str] = Field(
        default=["authorization", "x-client-info", "apikey", "content-type"],
        description="Headers the admin console may send cross-origin",
    )

    cors_allow_methods: list[str] = Field(
        default=["POST", "OPTIONS"],
        description="Methods advertised in Access-Control-Allow-Methods",
    )

    # ==================== CLASSIFICATION SETTINGS ====================

    message_fallback_enabled: bool = Field(
        default=True,
        description="Classify profile conflicts from the error message when the data "
        "service returns no error code. Heuristic: depends on provider wording.",
    )

    # ==================== CALLER VERIFICATION ====================

    verify_caller_jwt: bool = Field(
        default=False,
        description="Require a Bearer JWT signed with caller_jwt_secret on POST requests",
    )

    caller_jwt_secret: str = Field(
        default="",
        description="Secret used to verify the caller's JWT",
    )

    caller_jwt_algorithm: str = Field(
        default="HS256",
        description="Caller JWT signing algorithm",
    )

    # ==================== DEVELOPMENT / LOGGING ====================

    mock_enabled: bool = Field(
        default=False,
        description="Use in-memory identity and profile providers (development only)",
    )

    log_json: bool = Field(
        default=True,
        description="Render logs as JSON. Disable for colored console output.",
    )

    # ==================== CLASS METHODS ====================

    @classmethod
    def with_prefix(cls: type[T], prefix: str) -> T:
        """
        Create settings instance with custom environment prefix.

        Args:
            prefix: Environment variable prefix (e.g., "CONSOLE_PROVISIONING_")

        Returns:
            ProvisioningSettings instance configured with the specified prefix
        """

        class _PrefixedSettings(cls):
            model_config = SettingsConfigDict(
                env_prefix=prefix,
                env_file=".env",
                env_file_encoding="utf-8",
                case_sensitive=False,
                extra="ignore",
            )

        return _PrefixedSettings()

    # ==================== COMPUTED PROPERTIES ====================

    @property
    def auth_admin_url(self) -> str:
        """Auth admin endpoint used to create identities."""
        return f"{self.supabase_url.rstrip('/')}/auth/v1/admin/users"

    @property
    def profiles_url(self) -> str:
        """REST endpoint of the profiles table."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1/{self.profiles_table}"

    @property
    def cors_headers(self) -> dict[str, str]:
        """CORS headers attached to every response."""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Headers": ", ".join(self.cors_allow_headers),
            "Access-Control-Allow-Methods": ", ".join(self.cors_allow_methods),
        }

    @property
    def is_configured(self) -> bool:
        """True when provisioning requests can be served."""
        return not self.missing_credentials()

    def missing_credentials(self) -> list[str]:
        """
        List the credentials required to reach Supabase that are not set.

        Mock mode needs no credentials.

        Returns:
            Names of the missing settings (empty if fully configured)
        """
        if self.mock_enabled:
            return []

        missing = []
        if not self.supabase_url:
            missing.append("SUPABASE_URL")
        if not self.service_role_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        return missing

    def validate_caller_config(self) -> list[str]:
        """
        Validate caller verification settings.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.verify_caller_jwt and not self.caller_jwt_secret:
            errors.append("CALLER_JWT_SECRET is required when VERIFY_CALLER_JWT is enabled")
        return errors
