"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Clients (Supabase, Stripe) are built once per process
and passed into services explicitly; each module exposes its service
through an interface, and this file creates the concrete implementations.

Tests replace services with app.dependency_overrides instead of patching
module globals.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    import stripe
    from supabase import Client

    from shared.config import Settings
    from modules.auth.interfaces import IAuthService, IAccountLinker
    from modules.billing.interfaces import IBillingService
    from modules.checkout.interfaces import ICheckoutService
    from modules.customers.interfaces import ICustomerDirectory
    from modules.customers.repository import ProfileRepository
    from modules.subscriptions.interfaces import ISubscriptionSynchronizer
    from modules.subscriptions.repository import SubscriptionRepository
    from modules.subscriptions.webhooks import StripeWebhookHandler


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._settings: "Settings | None" = None
        self._supabase: "Client | None" = None
        self._stripe: "stripe.StripeClient | None" = None
        self._profile_repository: "ProfileRepository | None" = None
        self._subscription_repository: "SubscriptionRepository | None" = None
        self._customer_directory: "ICustomerDirectory | None" = None
        self._synchronizer: "ISubscriptionSynchronizer | None" = None
        self._webhook_handler: "StripeWebhookHandler | None" = None
        self._auth_service: "IAuthService | None" = None
        self._account_linker: "IAccountLinker | None" = None
        self._checkout_service: "ICheckoutService | None" = None
        self._billing_service: "IBillingService | None" = None

    @property
    def settings(self) -> "Settings":
        if self._settings is None:
            from shared.config import get_settings
            self._settings = get_settings()
        return self._settings

    @property
    def supabase(self) -> "Client":
        """Get the service-role Supabase client."""
        if self._supabase is None:
            from shared.database import get_supabase_client
            self._supabase = get_supabase_client(self.settings)
        return self._supabase

    @property
    def stripe(self) -> "stripe.StripeClient":
        """Get the Stripe client."""
        if self._stripe is None:
            from shared.stripe_client import get_stripe_client
            self._stripe = get_stripe_client()
        return self._stripe

    @property
    def profile_repository(self) -> "ProfileRepository":
        if self._profile_repository is None:
            from modules.customers.repository import ProfileRepository
            self._profile_repository = ProfileRepository(self.supabase)
        return self._profile_repository

    @property
    def subscription_repository(self) -> "SubscriptionRepository":
        if self._subscription_repository is None:
            from modules.subscriptions.repository import SubscriptionRepository
            self._subscription_repository = SubscriptionRepository(self.supabase)
        return self._subscription_repository

    @property
    def customers(self) -> "ICustomerDirectory":
        """Get the customer directory instance."""
        if self._customer_directory is None:
            from modules.customers.service import CustomerDirectory
            self._customer_directory = CustomerDirectory(
                repository=self.profile_repository,
                stripe_client=self.stripe,
            )
        return self._customer_directory

    @property
    def subscriptions(self) -> "ISubscriptionSynchronizer":
        """Get the subscription synchronizer instance."""
        if self._synchronizer is None:
            from modules.subscriptions.service import SubscriptionSynchronizer
            self._synchronizer = SubscriptionSynchronizer(
                stripe_client=self.stripe,
                subscriptions=self.subscription_repository,
                profiles=self.profile_repository,
            )
        return self._synchronizer

    @property
    def webhooks(self) -> "StripeWebhookHandler":
        """Get the Stripe webhook handler instance."""
        if self._webhook_handler is None:
            from modules.subscriptions.webhooks import StripeWebhookHandler
            self._webhook_handler = StripeWebhookHandler(
                stripe_client=self.stripe,
                synchronizer=self.subscriptions,
                webhook_secret=self.settings.stripe_webhook_secret,
            )
        return self._webhook_handler

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(self.settings)
        return self._auth_service

    @property
    def account_linker(self) -> "IAccountLinker":
        """Get the account linker instance."""
        if self._account_linker is None:
            from modules.auth.linking import AccountLinker
            self._account_linker = AccountLinker(self.supabase, self.settings)
        return self._account_linker

    @property
    def checkout(self) -> "ICheckoutService":
        """Get the checkout service instance."""
        if self._checkout_service is None:
            from modules.checkout.service import CheckoutService
            self._checkout_service = CheckoutService(
                stripe_client=self.stripe,
                customers=self.customers,
                synchronizer=self.subscriptions,
                accounts=self.account_linker,
                settings=self.settings,
            )
        return self._checkout_service

    @property
    def billing(self) -> "IBillingService":
        """Get the billing service instance."""
        if self._billing_service is None:
            from modules.billing.service import BillingService
            self._billing_service = BillingService(
                stripe_client=self.stripe,
                customers=self.customers,
                settings=self.settings,
            )
        return self._billing_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self.__init__()


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_account_linker() -> "IAccountLinker":
    """FastAPI dependency for the account linker."""
    return get_container().account_linker


def get_customer_directory() -> "ICustomerDirectory":
    """FastAPI dependency for the customer directory."""
    return get_container().customers


def get_subscription_synchronizer() -> "ISubscriptionSynchronizer":
    """FastAPI dependency for the subscription synchronizer."""
    return get_container().subscriptions


def get_webhook_handler() -> "StripeWebhookHandler":
    """FastAPI dependency for the Stripe webhook handler."""
    return get_container().webhooks


def get_checkout_service() -> "ICheckoutService":
    """FastAPI dependency for checkout service."""
    return get_container().checkout


def get_billing_service() -> "IBillingService":
    """FastAPI dependency for billing service."""
    return get_container().billing
