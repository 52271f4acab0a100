"""
Shared infrastructure for the SaaS Kit billing backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- stripe_client: Stripe client factory and object accessors
- exceptions: Base exception classes
- logging_config: Root logging setup

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, reset_client_cache
from .stripe_client import get_stripe_client, reset_stripe_client
from .exceptions import (
    SaaSKitError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ServiceUnavailableError,
    ExternalServiceError,
)
from .models import AuthenticatedUser, CamelModel, OperationResult

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "reset_client_cache",
    "get_stripe_client",
    "reset_stripe_client",
    "SaaSKitError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ConfigurationError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "AuthenticatedUser",
    "CamelModel",
    "OperationResult",
]
