"""Tests for shared/stripe_client.py."""

import pytest
from unittest.mock import patch

import stripe

from shared.exceptions import ConfigurationError
from shared.stripe_client import (
    get_stripe_client,
    reset_stripe_client,
    stripe_id,
    stripe_value,
)


class TestGetStripeClient:
    def setup_method(self):
        reset_stripe_client()

    def teardown_method(self):
        reset_stripe_client()

    @patch("shared.stripe_client.get_settings")
    def test_builds_client_from_secret_key(self, mock_settings):
        mock_settings.return_value.stripe_secret_key = "sk_test_123"

        client = get_stripe_client()

        assert isinstance(client, stripe.StripeClient)
        assert get_stripe_client() is client

    @patch("shared.stripe_client.get_settings")
    def test_raises_without_secret_key(self, mock_settings):
        mock_settings.return_value.stripe_secret_key = ""

        with pytest.raises(ConfigurationError, match="Stripe configuration missing"):
            get_stripe_client()


class TestStripeValue:
    def test_reads_dict_keys(self):
        assert stripe_value({"status": "active"}, "status") == "active"

    def test_none_value_yields_default(self):
        assert stripe_value({"email": None}, "email", "fallback") == "fallback"

    def test_missing_key_yields_default(self):
        assert stripe_value({}, "email", "fallback") == "fallback"

    def test_none_object_yields_default(self):
        assert stripe_value(None, "anything", 3) == 3

    def test_reads_stripe_objects(self):
        subscription = stripe.StripeObject.construct_from(
            {"id": "sub_123", "items": {"data": [{"id": "si_1"}]}},
            "sk_test",
        )
        assert stripe_value(subscription, "id") == "sub_123"
        assert stripe_value(stripe_value(subscription, "items"), "data")[0]["id"] == "si_1"

    def test_reads_plain_attributes(self):
        class Card:
            brand = "visa"

        assert stripe_value(Card(), "brand") == "visa"
        assert stripe_value(Card(), "last4", "0000") == "0000"


class TestStripeId:
    def test_bare_id(self):
        assert stripe_id("cus_123") == "cus_123"

    def test_expanded_object(self):
        assert stripe_id({"id": "cus_123", "email": "a@example.com"}) == "cus_123"

    def test_empty_values(self):
        assert stripe_id(None) is None
        assert stripe_id("") is None
