"""
Billing endpoints.

Mounted under /api. Known failures (no billing account, missing invoice,
unconfigured portal) pass through to the error handler; anything else is
logged and answered with a generic 500.
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_billing_service
from shared.exceptions import ExternalServiceError, SaaSKitError, ValidationError

from .interfaces import IBillingService
from .models import (
    BillingAddressResponse,
    InvoiceRequest,
    InvoiceUrlResponse,
    PaymentHistoryResponse,
    PortalSessionResponse,
    UpdateBillingAddressRequest,
    UserBillingRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/stripe/portal", response_model=PortalSessionResponse)
async def create_portal_session(
    request: UserBillingRequest,
    billing: IBillingService = Depends(get_billing_service),
) -> PortalSessionResponse:
    """Create a Stripe Customer Portal session and return its URL."""
    if not request.user_id:
        raise ValidationError("Missing required field: userId")

    try:
        return await billing.create_portal_session(request.user_id)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error creating portal session for user {request.user_id}")
        raise ExternalServiceError("Failed to create billing portal session", service="stripe")


@router.post("/stripe/invoice", response_model=InvoiceUrlResponse)
async def get_invoice(
    request: InvoiceRequest,
    billing: IBillingService = Depends(get_billing_service),
) -> InvoiceUrlResponse:
    if not request.invoice_id:
        raise ValidationError("Missing required field: invoiceId")

    try:
        return await billing.get_invoice_url(request.invoice_id)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error fetching invoice {request.invoice_id}")
        raise ExternalServiceError("Failed to fetch invoice", service="stripe")


@router.post("/stripe/payment-history", response_model=PaymentHistoryResponse)
async def get_payment_history(
    request: UserBillingRequest,
    billing: IBillingService = Depends(get_billing_service),
) -> PaymentHistoryResponse:
    if not request.user_id:
        raise ValidationError("Missing required field: userId")

    try:
        payments = await billing.get_payment_history(request.user_id)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error fetching payment history for user {request.user_id}")
        raise ExternalServiceError("Failed to fetch payment history", service="stripe")

    return PaymentHistoryResponse(payments=payments)


@router.post("/stripe/billing-address", response_model=BillingAddressResponse)
async def get_billing_address(
    request: UserBillingRequest,
    billing: IBillingService = Depends(get_billing_service),
) -> BillingAddressResponse:
    if not request.user_id:
        raise ValidationError("Missing required field: userId")

    try:
        address = await billing.get_billing_address(request.user_id)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error fetching billing address for user {request.user_id}")
        raise ExternalServiceError("Failed to fetch billing address", service="stripe")

    return BillingAddressResponse(address=address)


@router.put("/stripe/billing-address", response_model=BillingAddressResponse)
async def update_billing_address(
    request: UpdateBillingAddressRequest,
    billing: IBillingService = Depends(get_billing_service),
) -> BillingAddressResponse:
    if not request.user_id or request.address is None:
        raise ValidationError("Missing required fields: userId, address")

    try:
        address = await billing.update_billing_address(request.user_id, request.address)
    except SaaSKitError:
        raise
    except Exception:
        logger.exception(f"Error updating billing address for user {request.user_id}")
        raise ExternalServiceError("Failed to update billing address", service="stripe")

    return BillingAddressResponse(address=address)
