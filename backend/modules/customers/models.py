"""
Customer directory data models.

A Profile is the application's user record; it carries the Stripe customer
id once the user has been linked to a billing identity.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models import CamelModel, OperationResult


class Profile(BaseModel):
    """Row of the ``profiles`` table."""

    id: str = Field(..., description="Profile ID (UUID)")
    user_id: str = Field(..., description="Supabase auth user ID")
    email: str = Field(..., description="Email address")
    full_name: Optional[str] = Field(None, description="Display name")
    stripe_customer_id: Optional[str] = Field(
        None,
        description="Stripe customer ID, null until first purchase",
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AtomicCustomerResult(BaseModel):
    """Row returned by the create_customer_and_profile_atomic procedure."""

    profile_id: str
    created_customer: bool = False
    created_profile: bool = False


class CustomerLookupResult(OperationResult):
    """Result of resolving a user's profile and billing identity."""

    profile: Optional[Profile] = None
    stripe_customer_id: Optional[str] = None


class CustomerCreationResult(OperationResult):
    """Result of linking a user to a Stripe customer."""

    profile: Optional[Profile] = None
    stripe_customer_id: Optional[str] = None
    is_new_customer: bool = False
    is_new_profile: bool = False


class StripeCustomerResult(OperationResult):
    """Result of minting a customer in Stripe."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    customer: Optional[Any] = None


class CreateCustomerRequest(CamelModel):
    """Body of POST /api/auth/create-customer."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    full_name: Optional[str] = None


class CreateCustomerData(CamelModel):
    stripe_customer_id: Optional[str] = None
    profile_id: Optional[str] = None
    is_new_customer: bool = False
    is_new_profile: bool = False


class CreateCustomerResponse(CamelModel):
    """Response of POST /api/auth/create-customer."""

    success: bool = True
    message: str
    data: CreateCustomerData


class CustomerIdRequest(CamelModel):
    """Body of POST /api/stripe/get-customer-id."""

    user_id: Optional[str] = None


class CustomerIdResponse(CamelModel):
    success: bool = True
    stripe_customer_id: str
