"""Provisioning result model.

A ProvisionResult is the only thing the provisioner hands back: either the
new user's ID or a classified error with the raw provider details.
"""

from typing import Any

from pydantic import BaseModel, Field

SUCCESS_MESSAGE = "User created and profile updated successfully"


class ProvisionResult(BaseModel):
    """Outcome of a single provisioning request."""

    success: bool = Field(..., description="True when identity and profile were both written")
    status_code: int = Field(..., description="HTTP status to answer with")

    # Success
    user_id: str | None = Field(None, description="ID of the created identity")
    message: str | None = Field(None, description="Confirmation message")

    # Failure
    error_type: str | None = Field(None, description="Error class name (e.g. DuplicateEmailError)")
    error_message: str | None = Field(None, description="User-facing error message")
    details: dict[str, Any] | None = Field(None, description="Raw provider error for diagnostics")

    @classmethod
    def created(cls, user_id: str) -> "ProvisionResult":
        return cls(success=True, status_code=201, user_id=user_id, message=SUCCESS_MESSAGE)

    def to_response_body(self) -> dict[str, Any]:
        """
        Serialise to the JSON body sent to the admin console.

        Returns:
            {"message", "userId"} on success, {"error", "details"?} on failure
        """
        if self.success:
            return {"message": self.message, "userId": self.user_id}

        body: dict[str, Any] = {"error": self.error_message}
        if self.details is not None:
            body["details"] = self.details
        return body
