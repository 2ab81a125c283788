"""In-memory identity and profile providers for development and tests.

These providers reproduce the behaviour the provisioner relies on without
a Supabase project:
1. Identity creation rejects duplicate emails and short passwords with the
   same messages and codes as the auth admin API
2. Creating an identity inserts an empty profile row, like the database
   trigger on auth.users does
3. Profile updates enforce the profiles_username_key unique constraint and
   single-row semantics
"""

from typing import Any
from uuid import uuid4

from ..config import ProvisioningSettings
from ..errors import DataServiceFailure, IdentityServiceFailure
from ..models import AuthIdentity, ProfileUpdate
from .base import BaseIdentityProvider, BaseProfileStore

MIN_PASSWORD_LENGTH = 6


class InMemoryProfileStore(BaseProfileStore):
    """
    Profile table kept in a dict keyed by user ID.

    Example usage:
        store = InMemoryProfileStore(settings)
        provider = InMemoryIdentityProvider(settings, profile_store=store)
    """

    def __init__(self, settings: ProvisioningSettings):
        super().__init__(settings)
        self.rows: dict[str, dict[str, Any]] = {}

    def insert_default_row(self, user_id: str, email: str) -> None:
        """Insert the row the signup trigger would create."""
        self.rows[user_id] = {
            "id": user_id,
            "email": email,
            "full_name": None,
            "username": None,
            "role": "user",
            "status": "pending",
        }

    async def update_profile_by_id(self, user_id: str, update: ProfileUpdate) -> dict[str, Any]:
        row = self.rows.get(user_id)
        if row is None:
            raise DataServiceFailure(
                "JSON object requested, multiple (or no) rows returned",
                code="PGRST116",
                details="The result contains 0 rows",
                status=406,
            )

        for other_id, other in self.rows.items():
            if other_id != user_id and other["username"] == update.username:
                raise DataServiceFailure(
                    'duplicate key value violates unique constraint "profiles_username_key"',
                    code="23505",
                    details=f"Key (username)=({update.username}) already exists.",
                    status=409,
                )

        row.update(update.model_dump())
        return dict(row)


class InMemoryIdentityProvider(BaseIdentityProvider):
    """
    Identity store kept in a dict keyed by lowercased email.

    When given a profile store, every created identity gets a default
    profile row in it.
    """

    def __init__(
        self,
        settings: ProvisioningSettings,
        profile_store: InMemoryProfileStore | None = None,
    ):
        super().__init__(settings)
        self.profile_store = profile_store
        self.identities: dict[str, AuthIdentity] = {}

    async def create_identity(
        self,
        email: str,
        password: str,
        confirm_email: bool = False,
    ) -> AuthIdentity | None:
        if email.lower() in self.identities:
            raise IdentityServiceFailure(
                "A user with this email address has already been registered",
                status=422,
                code="email_exists",
            )

        if len(password) < MIN_PASSWORD_LENGTH:
            raise IdentityServiceFailure(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters.",
                status=422,
                code="weak_password",
            )

        identity = AuthIdentity(id=str(uuid4()), email=email, email_confirmed=confirm_email)
        self.identities[email.lower()] = identity

        if self.profile_store is not None:
            self.profile_store.insert_default_row(identity.id, email)

        return identity
