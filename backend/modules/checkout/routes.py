"""
Checkout endpoints.

Mounted under /api. Stripe failures are logged here and answered with a
generic 500; checkout exceptions pass through to the error handler.
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_checkout_service
from api.middleware.auth import get_current_user
from shared.exceptions import ExternalServiceError, SaaSKitError
from shared.models import AuthenticatedUser

from .interfaces import ICheckoutService
from .models import (
    CheckoutSessionResponse,
    CheckoutVerification,
    CreateCheckoutRequest,
    ReconcileAccountRequest,
    ReconciliationResult,
    VerifyCheckoutRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe/checkout/verify", response_model=CheckoutVerification)
async def verify_checkout(
    request: VerifyCheckoutRequest,
    service: ICheckoutService = Depends(get_checkout_service),
) -> CheckoutVerification:
    """
    Verify a completed Checkout Session.

    Authenticated callers pass their userId; guests pass isGuest=true and
    get an accountStatus block back.
    """
    try:
        return await service.verify_checkout_session(
            request.session_id, request.user_id, request.is_guest
        )
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error verifying checkout session {request.session_id}")
        raise ExternalServiceError("Failed to verify checkout session", service="stripe")


@router.post("/stripe/checkout", response_model=CheckoutSessionResponse)
async def create_checkout(
    request: CreateCheckoutRequest,
    service: ICheckoutService = Depends(get_checkout_service),
) -> CheckoutSessionResponse:
    """Create a subscription Checkout Session for a user."""
    try:
        return await service.create_checkout_session(
            request.price_id, request.user_id, request.user_email, request.full_name
        )
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error creating checkout session for user {request.user_id}")
        raise ExternalServiceError("Failed to create checkout session", service="stripe")


@router.post("/reconcile-account", response_model=ReconciliationResult)
async def reconcile_account(
    request: ReconcileAccountRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    service: ICheckoutService = Depends(get_checkout_service),
) -> ReconciliationResult:
    """Claim a guest purchase for the signed-in account with the same email."""
    try:
        return await service.reconcile_guest_payment(
            request.session_id, request.user_email, user.id, user.email
        )
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error reconciling session {request.session_id} for user {user.id}")
        raise ExternalServiceError(
            "Internal server error during reconciliation", service="stripe"
        )
