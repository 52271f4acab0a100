"""
Subscription sync endpoints.

Mounted under /api. Both endpoints end in a full re-sync of one
Stripe customer.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import (
    get_customer_directory,
    get_subscription_synchronizer,
    get_webhook_handler,
)
from modules.customers.interfaces import ICustomerDirectory
from shared.exceptions import ExternalServiceError, SaaSKitError, ValidationError

from .exceptions import StripeCustomerNotFoundError
from .interfaces import ISubscriptionSynchronizer
from .models import SyncRequest, SyncResponse, WebhookResponse
from .webhooks import StripeWebhookHandler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe/sync", response_model=SyncResponse)
async def force_sync(
    request: SyncRequest,
    customers: ICustomerDirectory = Depends(get_customer_directory),
    synchronizer: ISubscriptionSynchronizer = Depends(get_subscription_synchronizer),
) -> SyncResponse:
    """
    Force a re-sync of the user's subscription from Stripe.

    Useful after out-of-band changes and for debugging mirror drift.
    """
    if not request.user_id:
        raise ValidationError("Missing required field: userId")

    lookup = await customers.get_customer_by_user_id(request.user_id)
    if not lookup.success or not lookup.stripe_customer_id:
        logger.warning(f"No Stripe customer found for user: {request.user_id}")
        raise StripeCustomerNotFoundError(request.user_id)

    try:
        data = await synchronizer.sync_stripe_customer_data(lookup.stripe_customer_id)
    except Exception:
        logger.exception(f"Error synchronizing user {request.user_id} with Stripe")
        raise ExternalServiceError("Failed to synchronize with Stripe", service="stripe")

    return SyncResponse(subscription_data=data)


@router.post("/stripe/webhook", response_model=WebhookResponse)
async def stripe_webhook(
    request: Request,
    handler: StripeWebhookHandler = Depends(get_webhook_handler),
) -> WebhookResponse:
    """
    Receive Stripe webhook deliveries.

    The raw body is passed through untouched; signature verification
    depends on the exact bytes.
    """
    payload = await request.body()
    signature = request.headers.get("stripe-signature")

    try:
        await handler.handle(payload, signature)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception("Error processing webhook")
        raise ExternalServiceError("Webhook processing failed", service="stripe")

    return WebhookResponse()
