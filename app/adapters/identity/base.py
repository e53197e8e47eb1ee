from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class AuthSession:
    """Session issued by an identity provider after a successful sign-in."""

    access_token: str
    token_type: str
    expires_in: int
    user_id: str
    email: str
    refresh_token: str | None = None


class AbstractIdentityProvider(ABC):
    """Interface for email/password identity providers."""

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Authenticate an account by email and password.

        Args:
            email: Account email as submitted by the user.
            password: Plain-text password.

        Returns:
            AuthSession: Tokens and identity of the authenticated account.

        Raises:
            AuthenticationAppError: If the credentials are rejected.
            IdentityProviderAppError: If the provider cannot be reached or
                answers unexpectedly.
        """
        ...
