"""Provisioning models."""

from .identity import AuthIdentity, ProfileUpdate
from .request import REQUIRED_FIELDS, ProfileRole, ProvisionRequest
from .result import SUCCESS_MESSAGE, ProvisionResult

__all__ = [
    # Request DTOs
    "ProvisionRequest",
    "ProfileRole",
    "REQUIRED_FIELDS",
    # External records
    "AuthIdentity",
    "ProfileUpdate",
    # Result
    "ProvisionResult",
    "SUCCESS_MESSAGE",
]
