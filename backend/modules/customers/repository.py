"""
Profile repository for database access.

Encapsulates Supabase queries against the ``profiles`` table and the
``create_customer_and_profile_atomic`` stored procedure.
"""

from datetime import datetime, timezone
from typing import Optional, Any

from shared.repository import BaseRepository
from .models import AtomicCustomerResult, Profile

ATOMIC_CREATE_FUNCTION = "create_customer_and_profile_atomic"


class ProfileRepository(BaseRepository[Profile]):
    """
    Repository for profile data access.

    Concurrency is left to the database: the atomic procedure locks the
    auth user row and the unique constraint on ``profiles.user_id`` makes
    concurrent creations converge on one row.
    """

    table_name = "profiles"

    def get_by_user_id(self, user_id: str) -> Optional[Profile]:
        """Get the profile owned by an auth user."""
        row = self._first(self._table().select("*").eq("user_id", user_id))
        return self._map_to_profile(row) if row else None

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        """Get a profile by its own ID."""
        row = self._first(self._table().select("*").eq("id", profile_id))
        return self._map_to_profile(row) if row else None

    def get_by_stripe_customer_id(self, stripe_customer_id: str) -> Optional[Profile]:
        """Get the profile linked to a Stripe customer."""
        row = self._first(
            self._table().select("*").eq("stripe_customer_id", stripe_customer_id)
        )
        return self._map_to_profile(row) if row else None

    def update_stripe_customer_id(
        self,
        user_id: str,
        stripe_customer_id: str,
    ) -> Optional[Profile]:
        """
        Set only the Stripe customer ID on an existing profile.

        Returns:
            The updated profile, or None if no row matched.
        """
        rows = self._rows(
            self._table()
            .update({
                "stripe_customer_id": stripe_customer_id,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            .eq("user_id", user_id)
        )
        return self._map_to_profile(rows[0]) if rows else None

    def create_customer_and_profile(
        self,
        user_id: str,
        email: str,
        stripe_customer_id: str,
        full_name: Optional[str] = None,
    ) -> Optional[AtomicCustomerResult]:
        """
        Create the profile and/or link the customer in one transaction.

        Returns:
            The procedure's flags, or None when it returned no row.
        """
        result = self._db.rpc(
            ATOMIC_CREATE_FUNCTION,
            {
                "p_user_id": user_id,
                "p_email": email,
                "p_stripe_customer_id": stripe_customer_id,
                "p_full_name": full_name,
            },
        ).execute()

        data = result.data
        if isinstance(data, dict):
            data = [data]
        if not data:
            return None
        return AtomicCustomerResult(
            profile_id=str(data[0]["profile_id"]),
            created_customer=bool(data[0].get("created_customer")),
            created_profile=bool(data[0].get("created_profile")),
        )

    def _map_to_profile(self, data: dict[str, Any]) -> Profile:
        """Map database row to Profile model."""
        return Profile(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            email=data.get("email") or "",
            full_name=data.get("full_name"),
            stripe_customer_id=data.get("stripe_customer_id"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )
