"""Identity provider adapter layer - abstracts over email/password backends."""

from app.adapters.identity.base import AbstractIdentityProvider, AuthSession
from app.adapters.identity.factory import create_identity_provider, get_identity_provider
from app.adapters.identity.static_provider import StaticCredentialsProvider
from app.adapters.identity.supabase_provider import SupabaseAuthProvider

__all__ = [
    "AbstractIdentityProvider",
    "AuthSession",
    "StaticCredentialsProvider",
    "SupabaseAuthProvider",
    "create_identity_provider",
    "get_identity_provider",
]
