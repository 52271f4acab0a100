"""
Checkout module data models.

Request and response bodies for creating and verifying Stripe Checkout
Sessions. All of them travel as camelCase JSON.
"""

from typing import Optional

from shared.models import CamelModel


class VerifyCheckoutRequest(CamelModel):
    """Body of POST /api/stripe/checkout/verify."""

    session_id: Optional[str] = None
    user_id: Optional[str] = None
    is_guest: bool = False


class VerifiedSubscription(CamelModel):
    """Plan summary shown on the checkout success page."""

    plan_name: str
    status: str
    price_id: Optional[str] = None
    current_period_end: Optional[str] = None
    subscription_id: Optional[str] = None


class VerifiedCustomer(CamelModel):
    id: str
    email: Optional[str] = None


class AccountStatus(CamelModel):
    """Whether a guest buyer's email already belongs to an account."""

    has_existing_account: bool
    email: str
    user_id: Optional[str] = None


class CheckoutVerification(CamelModel):
    """
    Result of verifying a completed Checkout Session.

    ``account_status`` is only set for guest checkouts, and stays None when
    the account lookup could not be performed.
    """

    session_id: str
    subscription: Optional[VerifiedSubscription] = None
    customer: VerifiedCustomer
    is_guest: bool
    account_status: Optional[AccountStatus] = None


class CreateCheckoutRequest(CamelModel):
    """Body of POST /api/stripe/checkout."""

    price_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    full_name: Optional[str] = None


class CheckoutSessionResponse(CamelModel):
    session_id: str
    url: Optional[str] = None
    customer_id: str


class ReconcileAccountRequest(CamelModel):
    """Body of POST /api/reconcile-account."""

    session_id: Optional[str] = None
    user_email: Optional[str] = None


class ReconciliationResult(CamelModel):
    """
    Outcome of attaching a guest purchase to a signed-in account.

    ``operation`` is "linked_existing" when the account had no Stripe
    customer yet and "updated_existing" when the guest customer replaced
    one the account already had.
    """

    success: bool = True
    message: str
    profile_id: Optional[str] = None
    subscription_linked: bool = False
    operation: str
