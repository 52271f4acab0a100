"""
Supabase client factory.

The billing backend only ever talks to Supabase with the service-role key:
profile and subscription writes, the atomic customer procedure and the
admin user listing all bypass row-level security. There is no end-user
session on the server, so token refresh and session persistence are off.
"""

from typing import Optional

from supabase import Client, ClientOptions, create_client

from .config import Settings, get_settings
from .exceptions import ConfigurationError

_service_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Return the process-wide service-role client, creating it on first use.

    Raises:
        ConfigurationError: SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is unset
    """
    global _service_client

    if _service_client is None:
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise ConfigurationError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.",
                code="SUPABASE_NOT_CONFIGURED",
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    return _service_client


def reset_client_cache() -> None:
    """Forget the cached client (tests, configuration reloads)."""
    global _service_client
    _service_client = None
