"""Request DTOs for the provisioning endpoint.

These are transient models (not stored anywhere) describing the payload
sent by the admin console.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProfileRole(str, Enum):
    """Roles that can be written to a profile row."""

    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


REQUIRED_FIELDS = ("email", "password", "full_name", "username", "role")


class ProvisionRequest(BaseModel):
    """
    Candidate user submitted by the admin console.

    Every field is optional at parse time so that missing fields can be
    reported together, in a single message, by the provisioner.
    """

    model_config = ConfigDict(extra="ignore")

    email: str | None = Field(None, description="Login email, unique in the identity store")
    password: str | None = Field(None, description="Initial password (length enforced by the identity service)")
    full_name: str | None = Field(None, description="Display name written to the profile row")
    username: str | None = Field(None, description="Username, unique in the profiles table")
    role: str | None = Field(None, description="One of: user, moderator, admin")

    def __repr__(self) -> str:
        return (
            f"ProvisionRequest(email={self.email!r}, username={self.username!r}, "
            f"role={self.role!r})"
        )
