"""Supabase identity and profile providers.

Talks to two Supabase services over HTTP using the service role key:
1. Auth admin API (GoTrue) - creates identities
2. REST API (PostgREST) - updates the profiles table

Transport errors (httpx.HTTPError) are not translated here; they surface
to the provisioner, which reports them as internal errors.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

from ..config import ProvisioningSettings
from ..errors import DataServiceFailure, IdentityServiceFailure
from ..models import AuthIdentity, ProfileUpdate
from .base import BaseIdentityProvider, BaseProfileStore


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class _SupabaseClientMixin:
    """Shared header and client handling for Supabase services."""

    settings: ProvisioningSettings
    _client: httpx.AsyncClient | None

    def _service_headers(self) -> dict[str, str]:
        key = self.settings.service_role_key
        return {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        # Injected clients are owned by the caller
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient() as client:
            yield client


class SupabaseIdentityProvider(_SupabaseClientMixin, BaseIdentityProvider):
    """
    Identity provider backed by the Supabase auth admin API.

    Example usage:
        settings = ProvisioningSettings()
        provider = SupabaseIdentityProvider(settings)

        identity = await provider.create_identity(
            "jane@example.com", "s3cret-pass", confirm_email=False
        )
    """

    def __init__(self, settings: ProvisioningSettings, client: httpx.AsyncClient | None = None):
        """
        Initialize the Supabase identity provider.

        Args:
            settings: Provisioning settings
            client: Optional shared httpx client (a new one is opened per call otherwise)
        """
        super().__init__(settings)
        self._client = client
        self.endpoint = settings.auth_admin_url

    async def create_identity(
        self,
        email: str,
        password: str,
        confirm_email: bool = False,
    ) -> AuthIdentity | None:
        """
        Create a user through POST /auth/v1/admin/users.

        Args:
            email: Login email
            password: Initial password
            confirm_email: Sent as email_confirm; False leaves the email unconfirmed

        Returns:
            The created identity, or None if the response carried no user object

        Raises:
            IdentityServiceFailure: If the auth admin API answers with an error
            httpx.HTTPError: On transport failure
        """
        async with self._session() as client:
            response = await client.post(
                self.endpoint,
                json={
                    "email": email,
                    "password": password,
                    "email_confirm": confirm_email,
                },
                headers=self._service_headers(),
            )

        if response.is_error:
            raise self._parse_error(response)

        return AuthIdentity.from_response(_json_body(response))

    def _parse_error(self, response: httpx.Response) -> IdentityServiceFailure:
        """
        Convert an auth admin error response into an IdentityServiceFailure.

        GoTrue error bodies vary across releases:
        - {"code": 422, "error_code": "email_exists", "msg": "..."}
        - {"code": 400, "msg": "..."}
        - {"error": "...", "error_description": "..."}

        Args:
            response: Error response

        Returns:
            IdentityServiceFailure with message, HTTP status and error code
        """
        body = _json_body(response)
        if not isinstance(body, dict):
            return IdentityServiceFailure(
                response.text or response.reason_phrase,
                status=response.status_code,
            )

        message = (
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or response.reason_phrase
        )

        # "code" holds the HTTP status on older releases
        code = body.get("error_code")
        if code is None and isinstance(body.get("code"), str):
            code = body["code"]

        return IdentityServiceFailure(str(message), status=response.status_code, code=code)


class SupabaseProfileStore(_SupabaseClientMixin, BaseProfileStore):
    """
    Profile store backed by the Supabase REST API.

    Issues a single-row PATCH filtered on the profile ID. Zero or several
    matching rows are reported by the REST API as an error (PGRST116).

    Example usage:
        store = SupabaseProfileStore(settings)
        row = await store.update_profile_by_id(
            user_id,
            ProfileUpdate(full_name="Jane Doe", username="jane", role="user"),
        )
    """

    # Single JSON object instead of an array
    SINGLE_OBJECT_MEDIA_TYPE = "application/vnd.pgrst.object+json"

    def __init__(self, settings: ProvisioningSettings, client: httpx.AsyncClient | None = None):
        """
        Initialize the Supabase profile store.

        Args:
            settings: Provisioning settings
            client: Optional shared httpx client (a new one is opened per call otherwise)
        """
        super().__init__(settings)
        self._client = client
        self.endpoint = settings.profiles_url

    async def update_profile_by_id(self, user_id: str, update: ProfileUpdate) -> dict[str, Any]:
        """
        Update the profile row through PATCH /rest/v1/{table}?id=eq.{user_id}.

        Args:
            user_id: Identity ID the profile row is keyed by
            update: Columns to write

        Returns:
            The updated row

        Raises:
            DataServiceFailure: If the REST API answers with an error
            httpx.HTTPError: On transport failure
        """
        headers = {
            **self._service_headers(),
            "Accept": self.SINGLE_OBJECT_MEDIA_TYPE,
            "Prefer": "return=representation",
        }

        async with self._session() as client:
            response = await client.patch(
                self.endpoint,
                params={"id": f"eq.{user_id}"},
                json=update.model_dump(),
                headers=headers,
            )

        if response.is_error:
            raise self._parse_error(response)

        row = _json_body(response)
        return row if isinstance(row, dict) else {}

    def _parse_error(self, response: httpx.Response) -> DataServiceFailure:
        """
        Convert a REST API error response into a DataServiceFailure.

        Args:
            response: Error response with a {code, message, details, hint} body

        Returns:
            DataServiceFailure carrying the provider code and HTTP status
        """
        body = _json_body(response)
        if not isinstance(body, dict):
            return DataServiceFailure(
                response.text or response.reason_phrase,
                status=response.status_code,
            )

        code = body.get("code")
        return DataServiceFailure(
            str(body.get("message") or response.reason_phrase),
            code=str(code) if code is not None else None,
            details=body.get("details"),
            hint=body.get("hint"),
            status=response.status_code,
        )
