"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    SaaSKitError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ServiceUnavailableError,
    ConfigurationError,
    ExternalServiceError,
)


class TestSaaSKitError:
    def test_stores_message(self):
        error = SaaSKitError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code_is_class_name(self):
        assert SaaSKitError("Test error").code == "SaaSKitError"

    def test_custom_code(self):
        error = SaaSKitError("Test error", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_default_details(self):
        assert SaaSKitError("Test error").details == {}

    def test_to_dict(self):
        """to_dict carries code and details for logs."""
        error = SaaSKitError("Test error", code="TEST_ERROR", details={"key": "value"})
        result = error.to_dict()

        assert result["error"] == "TEST_ERROR"
        assert result["message"] == "Test error"
        assert result["details"]["key"] == "value"

    def test_to_response_exposes_only_message(self):
        """Client responses never carry internal details."""
        error = SaaSKitError("Test error", details={"internal": "secret"})
        assert error.to_response() == {"error": "Test error"}

    def test_default_status_is_500(self):
        assert SaaSKitError("Test error").status_code == 500


class TestStatusCodes:
    @pytest.mark.parametrize(
        "exc_class,status",
        [
            (NotFoundError, 404),
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (ServiceUnavailableError, 503),
            (ConfigurationError, 500),
        ],
    )
    def test_status_code(self, exc_class, status):
        error = exc_class("message")
        assert isinstance(error, SaaSKitError)
        assert error.status_code == status

    def test_validation_error_with_details(self):
        error = ValidationError(
            "Validation failed",
            details={"fields": {"email": "Invalid format"}}
        )
        assert error.details["fields"]["email"] == "Invalid format"


class TestExternalServiceError:
    def test_stores_service(self):
        error = ExternalServiceError("Connection failed", service="stripe")
        assert error.service == "stripe"
        assert error.status_code == 500

    def test_includes_service_in_details(self):
        error = ExternalServiceError("Connection failed", service="stripe")
        assert error.to_dict()["details"]["service"] == "stripe"

    def test_preserves_other_details(self):
        error = ExternalServiceError(
            "Connection failed",
            service="stripe",
            details={"status_code": 502}
        )
        result = error.to_dict()

        assert result["details"]["service"] == "stripe"
        assert result["details"]["status_code"] == 502

    def test_response_hides_service(self):
        error = ExternalServiceError("Failed to synchronize with Stripe", service="stripe")
        assert error.to_response() == {"error": "Failed to synchronize with Stripe"}
