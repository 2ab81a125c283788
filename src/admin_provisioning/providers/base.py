"""Base interfaces for the identity service and the profile store."""

from abc import ABC, abstractmethod
from typing import Any

from ..config import ProvisioningSettings
from ..models import AuthIdentity, ProfileUpdate


class BaseIdentityProvider(ABC):
    """
    Base interface for identity services.

    Implementations create authentication identities and report failures
    by raising IdentityServiceFailure with the provider's message, status
    and code.
    """

    def __init__(self, settings: ProvisioningSettings):
        """
        Initialize the identity provider.

        Args:
            settings: Provisioning settings
        """
        self.settings = settings

    @abstractmethod
    async def create_identity(
        self,
        email: str,
        password: str,
        confirm_email: bool = False,
    ) -> AuthIdentity | None:
        """
        Create an authentication identity.

        Args:
            email: Login email
            password: Initial password
            confirm_email: Mark the email as confirmed on creation

        Returns:
            The created identity, or None if the service returned no user object

        Raises:
            IdentityServiceFailure: If the identity service rejects the request
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the provider."""
        return None


class BaseProfileStore(ABC):
    """
    Base interface for the profile table.

    Implementations update an existing profile row and report failures by
    raising DataServiceFailure with the provider's code, message, details
    and status. They never insert rows.
    """

    def __init__(self, settings: ProvisioningSettings):
        """
        Initialize the profile store.

        Args:
            settings: Provisioning settings
        """
        self.settings = settings

    @abstractmethod
    async def update_profile_by_id(self, user_id: str, update: ProfileUpdate) -> dict[str, Any]:
        """
        Update the profile row keyed by user_id.

        Args:
            user_id: Identity ID the profile row is keyed by
            update: Columns to write

        Returns:
            The updated row

        Raises:
            DataServiceFailure: If the update fails or matches no single row
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the store."""
        return None
