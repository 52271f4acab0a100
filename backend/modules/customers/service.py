"""
Customer directory implementation.

Resolves and creates the link between a Supabase user and a Stripe
customer. Every method reports failure through a result object instead of
raising, so route handlers can decide the HTTP status.
"""

import logging
from typing import Optional

import stripe

from shared.models import OperationResult
from .interfaces import ICustomerDirectory
from .models import (
    CustomerCreationResult,
    CustomerLookupResult,
    StripeCustomerResult,
)
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

CUSTOMER_SOURCE = "saaskit_signup"


class CustomerDirectory(ICustomerDirectory):
    """Customer directory backed by the profiles table and Stripe."""

    def __init__(
        self,
        repository: ProfileRepository,
        stripe_client: stripe.StripeClient,
    ):
        self._profiles = repository
        self._stripe = stripe_client

    async def get_customer_by_user_id(self, user_id: str) -> CustomerLookupResult:
        try:
            profile = self._profiles.get_by_user_id(user_id)
        except Exception as e:
            logger.error(f"Error looking up profile for user {user_id}: {e}")
            return CustomerLookupResult(success=False, error=str(e))

        if profile is None:
            return CustomerLookupResult(success=False, error="Profile not found")

        return CustomerLookupResult(
            success=True,
            profile=profile,
            stripe_customer_id=profile.stripe_customer_id,
        )

    async def create_customer_and_profile(
        self,
        user_id: str,
        email: str,
        stripe_customer_id: str,
        full_name: Optional[str] = None,
    ) -> CustomerCreationResult:
        logger.info(f"Creating customer and profile for user: {user_id}")
        try:
            outcome = self._profiles.create_customer_and_profile(
                user_id, email, stripe_customer_id, full_name
            )
        except Exception as e:
            logger.error(f"Atomic customer creation failed for user {user_id}: {e}")
            return CustomerCreationResult(success=False, error=f"Database error: {e}")

        if outcome is None:
            return CustomerCreationResult(
                success=False,
                error="No data returned from atomic function",
            )

        try:
            profile = self._profiles.get_by_id(outcome.profile_id)
        except Exception as e:
            logger.error(f"Error fetching profile {outcome.profile_id}: {e}")
            profile = None

        if profile is None:
            return CustomerCreationResult(
                success=False,
                stripe_customer_id=stripe_customer_id,
                error="Profile created but could not fetch details",
            )

        return CustomerCreationResult(
            success=True,
            profile=profile,
            stripe_customer_id=profile.stripe_customer_id or stripe_customer_id,
            is_new_customer=outcome.created_customer,
            is_new_profile=outcome.created_profile,
        )

    async def create_stripe_customer(
        self,
        email: str,
        name: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> StripeCustomerResult:
        params: dict = {
            "email": email,
            "metadata": {"source": CUSTOMER_SOURCE, **(metadata or {})},
        }
        if name:
            params["name"] = name

        try:
            customer = self._stripe.customers.create(params=params)
        except stripe.StripeError as e:
            logger.error(f"Stripe customer creation failed for {email}: {e}")
            return StripeCustomerResult(success=False, error=str(e) or "Unknown Stripe error")

        logger.info(f"Created Stripe customer: {customer.id}")
        return StripeCustomerResult(success=True, customer=customer)

    async def update_customer_stripe_id(
        self,
        user_id: str,
        stripe_customer_id: str,
    ) -> OperationResult:
        try:
            profile = self._profiles.update_stripe_customer_id(user_id, stripe_customer_id)
        except Exception as e:
            logger.error(f"Error updating customer ID for user {user_id}: {e}")
            return OperationResult(success=False, error=str(e))

        if profile is None:
            return OperationResult(success=False, error="Profile not found")
        return OperationResult(success=True)

    async def ensure_customer_exists(
        self,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
    ) -> CustomerCreationResult:
        existing = await self.get_customer_by_user_id(user_id)
        if existing.success and existing.stripe_customer_id:
            return await self.create_customer_and_profile(
                user_id, email, existing.stripe_customer_id, full_name
            )

        created = await self.create_stripe_customer(
            email, full_name, {"user_id": user_id}
        )
        if not created.success or created.customer is None:
            return CustomerCreationResult(
                success=False,
                error=created.error or "Failed to create Stripe customer",
            )

        minted_id = created.customer.id
        result = await self.create_customer_and_profile(user_id, email, minted_id, full_name)
        if result.success and result.stripe_customer_id != minted_id:
            # A concurrent call linked its own customer first
            logger.warning(
                f"Stripe customer {minted_id} is orphaned; user {user_id} "
                f"is linked to {result.stripe_customer_id}"
            )
        return result
