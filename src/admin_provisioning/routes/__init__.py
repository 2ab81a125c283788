"""Provisioning routes."""

from .fastapi import create_router, create_user_admin

__all__ = [
    "create_router",
    "create_user_admin",
]
