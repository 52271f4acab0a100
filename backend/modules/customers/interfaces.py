"""
Customer directory interface.

Checkout, billing and subscription code depend on ICustomerDirectory,
not on the concrete Supabase/Stripe implementation.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import OperationResult
from .models import (
    CustomerCreationResult,
    CustomerLookupResult,
    StripeCustomerResult,
)


@runtime_checkable
class ICustomerDirectory(Protocol):
    """
    Maps internal users to Stripe customers.

    No method raises: every outcome is reported through a result object
    whose ``success`` flag must be checked before reading its payload.
    """

    async def get_customer_by_user_id(self, user_id: str) -> CustomerLookupResult:
        """
        Look up a user's profile and Stripe customer ID.

        Returns:
            success=False when no profile exists or the lookup failed.
            On success ``stripe_customer_id`` may still be None.
        """
        ...

    async def create_customer_and_profile(
        self,
        user_id: str,
        email: str,
        stripe_customer_id: str,
        full_name: Optional[str] = None,
    ) -> CustomerCreationResult:
        """
        Atomically create the profile and/or link the Stripe customer.

        Safe to repeat: a second identical call reports
        is_new_customer=False and is_new_profile=False.
        """
        ...

    async def create_stripe_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> StripeCustomerResult:
        """Create a customer in Stripe. Nothing is stored locally."""
        ...

    async def update_customer_stripe_id(
        self,
        user_id: str,
        stripe_customer_id: str,
    ) -> OperationResult:
        """Patch the Stripe customer ID on an existing profile."""
        ...

    async def ensure_customer_exists(
        self,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
    ) -> CustomerCreationResult:
        """Reuse the user's Stripe customer or mint and link a new one."""
        ...
