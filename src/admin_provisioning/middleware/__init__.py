"""Provisioning middleware."""

from .fastapi import CallerAuthMiddleware, CORSHeadersMiddleware

__all__ = [
    "CORSHeadersMiddleware",
    "CallerAuthMiddleware",
]
