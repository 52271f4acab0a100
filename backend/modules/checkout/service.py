"""
Checkout service implementation.

Verification walks one request through a fixed sequence: fetch the
session, confirm payment, resolve the customer, then branch. Each guard
that fails raises the matching checkout exception and stops the sequence;
nothing is written before the authenticated branch's sync.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import stripe

from shared.config import Settings
from shared.exceptions import ExternalServiceError
from shared.stripe_client import stripe_id, stripe_value
from modules.auth.interfaces import IAccountLinker
from modules.customers.interfaces import ICustomerDirectory
from modules.subscriptions.interfaces import ISubscriptionSynchronizer
from modules.subscriptions.service import FALLBACK_PERIOD, to_iso_timestamp

from .exceptions import (
    CustomerEmailRequiredError,
    CustomerUnresolvableError,
    EmailMismatchError,
    GuestPaymentClaimedError,
    MissingFieldError,
    PaymentIncompleteError,
    ReconciliationFailedError,
    SessionUserMismatchError,
)
from .interfaces import ICheckoutService
from .models import (
    AccountStatus,
    CheckoutSessionResponse,
    CheckoutVerification,
    ReconciliationResult,
    VerifiedCustomer,
    VerifiedSubscription,
)

logger = logging.getLogger(__name__)

UNKNOWN_PLAN = "Unknown Plan"


class CheckoutService(ICheckoutService):
    """Checkout service backed by Stripe Checkout."""

    def __init__(
        self,
        stripe_client: stripe.StripeClient,
        customers: ICustomerDirectory,
        synchronizer: ISubscriptionSynchronizer,
        accounts: IAccountLinker,
        settings: Settings,
    ):
        self._stripe = stripe_client
        self._customers = customers
        self._synchronizer = synchronizer
        self._accounts = accounts
        self._settings = settings

    async def verify_checkout_session(
        self,
        session_id: Optional[str],
        user_id: Optional[str] = None,
        is_guest: bool = False,
    ) -> CheckoutVerification:
        if not session_id:
            raise MissingFieldError("sessionId")
        if not is_guest and not user_id:
            raise MissingFieldError("userId", "for authenticated checkout")

        session = self._stripe.checkout.sessions.retrieve(
            session_id,
            params={"expand": ["subscription", "customer"]},
        )

        payment_status = stripe_value(session, "payment_status", "")
        if payment_status != "paid":
            logger.info(f"Checkout session {session_id} not paid: {payment_status}")
            raise PaymentIncompleteError(payment_status)

        customer_id, customer_email = self._resolve_customer(session)

        if is_guest:
            return await self._verify_guest(session, customer_id, customer_email)
        return await self._verify_authenticated(session, customer_id, user_id)

    async def create_checkout_session(
        self,
        price_id: Optional[str],
        user_id: Optional[str],
        user_email: Optional[str] = None,
        full_name: Optional[str] = None,
    ) -> CheckoutSessionResponse:
        if not price_id or not user_id:
            raise MissingFieldError("priceId and userId")

        logger.info(f"Starting checkout for user: {user_id}, price: {price_id}")

        lookup = await self._customers.get_customer_by_user_id(user_id)
        if lookup.success and lookup.stripe_customer_id:
            customer_id = lookup.stripe_customer_id
            profile_id = lookup.profile.id if lookup.profile else None
        else:
            if not user_email:
                raise CustomerEmailRequiredError()

            created = await self._customers.ensure_customer_exists(user_id, user_email, full_name)
            if not created.success or not created.stripe_customer_id:
                logger.error(f"Failed to create customer for user {user_id}: {created.error}")
                raise ExternalServiceError(
                    "Failed to create customer. Please try again.",
                    service="stripe",
                )
            customer_id = created.stripe_customer_id
            profile_id = created.profile.id if created.profile else None

        metadata = {
            "userId": user_id,
            "priceId": price_id,
            "profileId": profile_id or "",
        }
        app_url = self._settings.app_url.rstrip("/")

        session = self._stripe.checkout.sessions.create(
            params={
                "customer": customer_id,
                "line_items": [{"price": price_id, "quantity": 1}],
                "mode": "subscription",
                "allow_promotion_codes": True,
                "billing_address_collection": "auto",
                "customer_update": {"address": "auto", "name": "auto"},
                "success_url": f"{app_url}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
                "cancel_url": f"{app_url}/checkout/cancel",
                "metadata": metadata,
                "subscription_data": {"metadata": metadata},
            }
        )

        logger.info(f"Checkout session created: {stripe_value(session, 'id')}")
        return CheckoutSessionResponse(
            session_id=stripe_value(session, "id"),
            url=stripe_value(session, "url"),
            customer_id=customer_id,
        )

    async def reconcile_guest_payment(
        self,
        session_id: Optional[str],
        user_email: Optional[str],
        user_id: str,
        account_email: Optional[str],
    ) -> ReconciliationResult:
        if not session_id or not user_email:
            raise MissingFieldError("sessionId and userEmail")
        if not account_email or account_email.lower() != user_email.lower():
            raise EmailMismatchError()

        session = self._stripe.checkout.sessions.retrieve(
            session_id,
            params={"expand": ["subscription", "customer"]},
        )

        payment_status = stripe_value(session, "payment_status", "")
        if payment_status != "paid":
            raise PaymentIncompleteError(payment_status)

        customer_id, customer_email = self._resolve_customer(session)
        if customer_email.lower() != user_email.lower():
            logger.warning(f"Guest session {session_id} claimed by {user_id} under another email")
            raise EmailMismatchError("Email mismatch between payment and account")

        # The user_id stamp on the customer marks the purchase as claimed
        owner_id = self._customer_owner(session, customer_id)
        if owner_id and owner_id != user_id:
            logger.warning(
                f"Guest session {session_id} already claimed by {owner_id}; "
                f"{user_id} needs support review"
            )
            raise GuestPaymentClaimedError(session_id, owner_id)

        now = datetime.now(timezone.utc).isoformat()
        stamp = {
            "user_id": user_id,
            "reconciled_at": now,
            "original_session": session_id,
            "account_type": "converted_from_guest",
        }
        self._stripe.customers.update(customer_id, params={"metadata": stamp})

        existing = await self._customers.get_customer_by_user_id(user_id)
        previous_id = existing.stripe_customer_id if existing.success else None

        if previous_id and previous_id != customer_id:
            updated = await self._customers.update_customer_stripe_id(user_id, customer_id)
            if not updated.success:
                raise ReconciliationFailedError(
                    "Failed to link customer to user profile", updated.error or ""
                )
            self._stripe.customers.update(
                previous_id,
                params={
                    "metadata": {
                        "status": "secondary_customer",
                        "primary_customer": customer_id,
                        "reconciled_at": now,
                    }
                },
            )
            profile_id = existing.profile.id if existing.profile else None
            operation = "updated_existing"
            message = "Successfully linked your subscription to your account"
        else:
            linked = await self._customers.create_customer_and_profile(
                user_id, user_email, customer_id
            )
            if not linked.success:
                raise ReconciliationFailedError(
                    "Failed to link customer to user profile", linked.error or ""
                )
            profile_id = linked.profile.id if linked.profile else None
            operation = "linked_existing"
            message = "Successfully linked payment to your account"

        subscription_id = stripe_id(stripe_value(session, "subscription"))
        if subscription_id:
            self._stripe.subscriptions.update(subscription_id, params={"metadata": stamp})
            await self._synchronizer.sync_stripe_customer_data(customer_id)

        logger.info(
            f"Reconciled guest session {session_id}: customer {customer_id} "
            f"-> user {user_id} ({operation})"
        )
        return ReconciliationResult(
            message=message,
            profile_id=profile_id,
            subscription_linked=subscription_id is not None,
            operation=operation,
        )

    def _customer_owner(self, session: Any, customer_id: str) -> Optional[str]:
        customer = stripe_value(session, "customer")
        if isinstance(customer, str):
            customer = self._stripe.customers.retrieve(customer_id)
        return stripe_value(stripe_value(customer, "metadata", {}), "user_id")

    def _resolve_customer(self, session: Any) -> tuple[str, str]:
        customer = stripe_value(session, "customer")
        customer_id = stripe_id(customer)
        if not customer_id:
            raise CustomerUnresolvableError("No customer found in session")

        if isinstance(customer, str):
            customer = self._stripe.customers.retrieve(customer_id)

        if customer is None or stripe_value(customer, "deleted", False):
            raise CustomerUnresolvableError("Customer not found in Stripe")

        email = stripe_value(customer, "email")
        if not email:
            raise CustomerUnresolvableError("No email found for customer")

        return customer_id, email

    async def _verify_authenticated(
        self,
        session: Any,
        customer_id: str,
        user_id: str,
    ) -> CheckoutVerification:
        session_id = stripe_value(session, "id")
        metadata = stripe_value(session, "metadata", {})
        if stripe_value(metadata, "userId") != user_id:
            logger.warning(f"Session {session_id} verified by a different user: {user_id}")
            raise SessionUserMismatchError(session_id)

        data = await self._synchronizer.sync_stripe_customer_data(customer_id)

        return CheckoutVerification(
            session_id=session_id,
            subscription=VerifiedSubscription(
                plan_name=data.plan_name or UNKNOWN_PLAN,
                status=data.status.value,
                price_id=data.price_id,
                current_period_end=data.current_period_end
                or datetime.now(timezone.utc).isoformat(),
                subscription_id=data.subscription_id,
            ),
            customer=VerifiedCustomer(id=customer_id),
            is_guest=False,
        )

    async def _verify_guest(
        self,
        session: Any,
        customer_id: str,
        customer_email: str,
    ) -> CheckoutVerification:
        account_status: Optional[AccountStatus] = None
        try:
            account = await self._accounts.find_user_by_email(customer_email)
            account_status = AccountStatus(
                has_existing_account=account is not None,
                email=customer_email,
                user_id=account.id if account else None,
            )
        except Exception as e:
            # Only the claim-account hint depends on this lookup
            logger.warning(f"Account lookup failed during guest verification: {e}")

        return CheckoutVerification(
            session_id=stripe_value(session, "id"),
            subscription=self._guest_subscription(session),
            customer=VerifiedCustomer(id=customer_id, email=customer_email),
            is_guest=True,
            account_status=account_status,
        )

    def _guest_subscription(self, session: Any) -> Optional[VerifiedSubscription]:
        subscription_id = stripe_id(stripe_value(session, "subscription"))
        if not subscription_id:
            return None

        subscription = self._stripe.subscriptions.retrieve(subscription_id)
        items = stripe_value(stripe_value(subscription, "items"), "data", [])
        if not items:
            return None
        item = items[0]

        price_id = stripe_id(stripe_value(item, "price"))
        if not price_id:
            return None
        price = self._stripe.prices.retrieve(price_id)
        product = stripe_value(price, "product")
        if isinstance(product, str):
            product = self._stripe.products.retrieve(product)

        metadata = stripe_value(session, "metadata", {})
        plan_name = (
            stripe_value(product, "name")
            or stripe_value(metadata, "planName")
            or UNKNOWN_PLAN
        )

        period_end = stripe_value(item, "current_period_end") or stripe_value(
            subscription, "current_period_end"
        )
        current_period_end = to_iso_timestamp(period_end)
        if current_period_end is None:
            logger.warning(f"Subscription {subscription_id} has no usable period end")
            current_period_end = (datetime.now(timezone.utc) + FALLBACK_PERIOD).isoformat()

        return VerifiedSubscription(
            plan_name=plan_name,
            status=stripe_value(subscription, "status", "incomplete"),
            price_id=stripe_value(price, "id"),
            current_period_end=current_period_end,
            subscription_id=stripe_value(subscription, "id"),
        )
