"""Identity and profile models.

Both records are owned by external services; these models only carry the
fields this package reads or writes.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthIdentity(BaseModel):
    """Authentication identity returned by the identity service."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Opaque user ID issued by the identity service")
    email: str | None = Field(None, description="Email the identity was created with")

    @classmethod
    def from_response(cls, data: Any) -> "AuthIdentity | None":
        """
        Build an identity from an auth admin API response body.

        The admin API returns the user object directly; older versions wrap
        it as {"user": {...}}. Returns None when no user object is present.
        """
        if not isinstance(data, dict):
            return None
        user = data.get("user") if isinstance(data.get("user"), dict) else data
        if not user.get("id"):
            return None
        return cls(**user)


class ProfileUpdate(BaseModel):
    """Columns written to the pre-existing profile row."""

    full_name: str
    username: str
    role: str
    status: str = "approved"
