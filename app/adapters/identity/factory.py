"""Factory pattern for creating identity provider instances."""

from app.adapters.identity.base import AbstractIdentityProvider
from app.adapters.identity.static_provider import StaticCredentialsProvider
from app.adapters.identity.supabase_provider import SupabaseAuthProvider
from app.core.config import settings
from app.core.errors import ConfigurationAppError


def create_identity_provider() -> AbstractIdentityProvider:
    """Instantiate the identity provider selected by ``AUTH_PROVIDER``.

    Reads configuration from app.core.config.settings and validates
    provider-specific requirements.

    Returns:
        AbstractIdentityProvider: Configured provider instance.

    Raises:
        ConfigurationAppError: If the provider is unknown or misconfigured.
    """
    provider = settings.auth.provider.lower()

    if provider == "static":
        if not settings.auth.admin_email or not settings.auth.admin_password:
            raise ConfigurationAppError(
                code="auth_missing_admin_credentials",
                message="Static provider requires AUTH_ADMIN_EMAIL and AUTH_ADMIN_PASSWORD",
            )
        return StaticCredentialsProvider(
            admin_email=settings.auth.admin_email,
            admin_password=settings.auth.admin_password,
        )

    if provider == "supabase":
        if not settings.auth.supabase_url or not settings.auth.supabase_anon_key:
            raise ConfigurationAppError(
                code="auth_missing_supabase_config",
                message="Supabase provider requires AUTH_SUPABASE_URL and AUTH_SUPABASE_ANON_KEY",
            )
        return SupabaseAuthProvider(
            url=settings.auth.supabase_url,
            anon_key=settings.auth.supabase_anon_key,
            timeout_seconds=settings.auth.timeout_seconds,
        )

    raise ConfigurationAppError(
        code="auth_unknown_provider",
        message=(
            f"Unknown identity provider: '{provider}'. Supported providers: static, supabase"
        ),
    )


_identity_provider: AbstractIdentityProvider | None = None
_identity_provider_config: tuple | None = None


def get_identity_provider() -> AbstractIdentityProvider:
    """Return the process-wide identity provider.

    The instance is cached in-module and rebuilt whenever the ``AUTH_*``
    settings change (primarily in tests).

    Raises:
        ConfigurationAppError: If the provider is unknown or misconfigured.
    """

    global _identity_provider, _identity_provider_config

    auth = settings.auth
    config = (
        auth.provider,
        auth.admin_email,
        auth.admin_password,
        auth.supabase_url,
        auth.supabase_anon_key,
        auth.timeout_seconds,
    )

    if _identity_provider is None or _identity_provider_config != config:
        _identity_provider = create_identity_provider()
        _identity_provider_config = config

    return _identity_provider
