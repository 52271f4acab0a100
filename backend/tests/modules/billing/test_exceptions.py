"""Tests for billing module exceptions."""

from modules.billing.exceptions import (
    BillingAccountNotFoundError,
    InvoiceNotFoundError,
    PortalNotConfiguredError,
    PORTAL_SETTINGS_URL,
)
from shared.exceptions import ConfigurationError, NotFoundError


class TestBillingAccountNotFoundError:
    def test_message_and_status(self):
        error = BillingAccountNotFoundError("user-1")
        assert isinstance(error, NotFoundError)
        assert error.status_code == 404
        assert error.message == "No billing account found. Please create a subscription first."
        assert error.details["user_id"] == "user-1"


class TestInvoiceNotFoundError:
    def test_default_message(self):
        error = InvoiceNotFoundError("in_123")
        assert error.message == "Invoice not found"
        assert error.details["invoice_id"] == "in_123"

    def test_custom_message(self):
        assert InvoiceNotFoundError("in_123", "Invoice URL not available").message == (
            "Invoice URL not available"
        )


class TestPortalNotConfiguredError:
    def test_is_configuration_error(self):
        error = PortalNotConfiguredError()
        assert isinstance(error, ConfigurationError)
        assert error.status_code == 500

    def test_response_carries_type_and_remediation(self):
        body = PortalNotConfiguredError().to_response()

        assert body["error"] == "Stripe Customer Portal is not configured"
        assert body["type"] == "configuration_error"
        assert PORTAL_SETTINGS_URL in body["details"]
