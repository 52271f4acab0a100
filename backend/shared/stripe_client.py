"""
Stripe client factory.

Mirrors the Supabase factory: one StripeClient per process, built from
settings and passed into services rather than configured globally.
"""

from typing import Any, Optional

import stripe

from .config import get_settings
from .exceptions import ConfigurationError

_stripe_client: Optional[stripe.StripeClient] = None


def get_stripe_client() -> stripe.StripeClient:
    """
    Get the Stripe API client.

    Returns:
        StripeClient authenticated with the secret key

    Raises:
        ConfigurationError: STRIPE_SECRET_KEY is not configured
    """
    global _stripe_client

    if _stripe_client is None:
        settings = get_settings()
        if not settings.stripe_secret_key:
            raise ConfigurationError(
                "Stripe configuration missing. Set STRIPE_SECRET_KEY.",
                code="STRIPE_NOT_CONFIGURED",
            )
        _stripe_client = stripe.StripeClient(settings.stripe_secret_key)

    return _stripe_client


def reset_stripe_client() -> None:
    """Reset the cached Stripe client (for testing)."""
    global _stripe_client
    _stripe_client = None


def stripe_value(obj: Any, key: str, default: Any = None) -> Any:
    """
    Read a field from a Stripe object or a plain dict.

    Stripe responses, expanded sub-objects and webhook payloads arrive as
    either StripeObjects or dicts; both shapes are accepted. A field that
    is present but None yields the default.
    """
    if obj is None:
        return default
    if isinstance(obj, dict):
        value = obj.get(key, default)
    else:
        # Subscript first: names like "items" collide with dict methods
        try:
            value = obj[key]
        except (KeyError, TypeError):
            value = getattr(obj, key, default)
    return default if value is None else value


def stripe_id(obj: Any) -> Optional[str]:
    """Return the id of a reference that may be a bare id or an expanded object."""
    if obj is None:
        return None
    if isinstance(obj, str):
        return obj or None
    return stripe_value(obj, "id")
