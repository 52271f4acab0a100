"""
Customers module.

Maps Supabase users to Stripe customers and keeps the profile row in sync.

Public API:
- ICustomerDirectory: Interface for customer lookups and creation
- Profile: Application user record
- Result models: CustomerLookupResult, CustomerCreationResult, StripeCustomerResult
"""

from .interfaces import ICustomerDirectory
from .models import (
    Profile,
    CustomerLookupResult,
    CustomerCreationResult,
    StripeCustomerResult,
)

__all__ = [
    # Interface
    "ICustomerDirectory",
    # Models
    "Profile",
    "CustomerLookupResult",
    "CustomerCreationResult",
    "StripeCustomerResult",
]
