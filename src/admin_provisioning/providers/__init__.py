"""Identity and profile providers."""

from .base import BaseIdentityProvider, BaseProfileStore
from .mock import InMemoryIdentityProvider, InMemoryProfileStore
from .supabase import SupabaseIdentityProvider, SupabaseProfileStore

__all__ = [
    "BaseIdentityProvider",
    "BaseProfileStore",
    "SupabaseIdentityProvider",
    "SupabaseProfileStore",
    "InMemoryIdentityProvider",
    "InMemoryProfileStore",
]
