"""
Customer directory endpoints.

Called by the web client right after signup and whenever it needs the
user's Stripe customer ID.
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_customer_directory
from shared.exceptions import ExternalServiceError, NotFoundError, ValidationError

from .interfaces import ICustomerDirectory
from .models import (
    CreateCustomerData,
    CreateCustomerRequest,
    CreateCustomerResponse,
    CustomerIdRequest,
    CustomerIdResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/create-customer", response_model=CreateCustomerResponse)
async def create_customer(
    request: CreateCustomerRequest,
    customers: ICustomerDirectory = Depends(get_customer_directory),
) -> CreateCustomerResponse:
    """
    Create the Stripe customer and profile for a new user.

    Safe to call more than once; later calls report the existing records.
    """
    if not request.user_id or not request.email:
        raise ValidationError("Missing required fields: userId and email")

    result = await customers.ensure_customer_exists(
        request.user_id, request.email, request.full_name
    )
    if not result.success:
        logger.error(f"Customer creation failed for user {request.user_id}: {result.error}")
        raise ExternalServiceError("Failed to create customer and profile", service="supabase")

    logger.info(
        f"Customer ready for user {request.user_id}: "
        f"new_customer={result.is_new_customer}, new_profile={result.is_new_profile}"
    )
    return CreateCustomerResponse(
        message=(
            "Customer and profile created successfully"
            if result.is_new_profile
            else "Customer and profile already exist"
        ),
        data=CreateCustomerData(
            stripe_customer_id=result.stripe_customer_id,
            profile_id=result.profile.id if result.profile else None,
            is_new_customer=result.is_new_customer,
            is_new_profile=result.is_new_profile,
        ),
    )


@router.post("/stripe/get-customer-id", response_model=CustomerIdResponse)
async def get_customer_id(
    request: CustomerIdRequest,
    customers: ICustomerDirectory = Depends(get_customer_directory),
) -> CustomerIdResponse:
    """Return the Stripe customer ID linked to a user."""
    if not request.user_id:
        raise ValidationError("Missing required field: userId")

    lookup = await customers.get_customer_by_user_id(request.user_id)
    if not lookup.success or not lookup.stripe_customer_id:
        raise NotFoundError("No customer found")

    return CustomerIdResponse(stripe_customer_id=lookup.stripe_customer_id)
