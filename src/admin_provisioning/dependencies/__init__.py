"""Provisioning dependencies."""

from .fastapi import get_provisioner, get_settings

__all__ = [
    "get_settings",
    "get_provisioner",
]
