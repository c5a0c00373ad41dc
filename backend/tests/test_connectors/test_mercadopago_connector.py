"""
Unit tests for MercadoPagoConnector

Author: Mapu Team
Date: 2025-11-25
"""
import asyncio
import json

import httpx
import pytest

from marketplace.connectors.mercadopago_connector import (
    MercadoPagoConnector, CreatePreferenceData, PreferenceItem, PreferenceResponse, BackUrls,
)


def make_connector(handler):
    return MercadoPagoConnector("TEST-token", transport=httpx.MockTransport(handler))


class TestMercadoPagoConnector:
    def test_requires_access_token(self):
        with pytest.raises(ValueError):
            MercadoPagoConnector("")

    def test_create_preference_posts_payload(self):
        # Arrange
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["payload"] = json.loads(request.content)
            return httpx.Response(201, json={
                "id": "pref-1",
                "init_point": "https://www.mercadopago.com.ar/checkout?pref_id=pref-1",
                "sandbox_init_point": "https://sandbox.mercadopago.com.ar/checkout?pref_id=pref-1",
            })

        data = CreatePreferenceData(
            items=[PreferenceItem(title="Mate", quantity=2, unit_price=1000)],
            back_urls=BackUrls(success="app://payment/success?order_id=o1"),
            auto_return="approved",
            external_reference="o1",
        )

        # Act
        preference = asyncio.run(make_connector(handler).create_preference(data))

        # Assert
        assert preference.id == "pref-1"
        assert seen["url"] == "https://api.mercadopago.com/checkout/preferences"
        assert seen["auth"] == "Bearer TEST-token"
        assert seen["payload"]["external_reference"] == "o1"
        assert seen["payload"]["items"][0]["currency_id"] == "ARS"
        assert "payer" not in seen["payload"]

    def test_create_preference_returns_none_on_http_error(self):
        def handler(request):
            return httpx.Response(400, json={"message": "invalid items"})

        data = CreatePreferenceData(items=[PreferenceItem(title="Mate", quantity=1, unit_price=10)])

        assert asyncio.run(make_connector(handler).create_preference(data)) is None

    def test_get_payment_info(self):
        def handler(request):
            assert request.url.path == "/v1/payments/123"
            return httpx.Response(200, json={"id": 123, "status": "approved", "external_reference": "o1"})

        payment = asyncio.run(make_connector(handler).get_payment_info("123"))

        assert payment["status"] == "approved"

    def test_get_payment_info_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"message": "not found"})

        assert asyncio.run(make_connector(handler).get_payment_info("999")) is None


class TestPreferenceResponse:
    def test_checkout_url_uses_sandbox_in_test_mode(self):
        preference = PreferenceResponse(id="p", init_point="https://prod", sandbox_init_point="https://sandbox")

        assert preference.checkout_url(test_mode=True) == "https://sandbox"
        assert preference.checkout_url(test_mode=False) == "https://prod"

    def test_checkout_url_without_sandbox(self):
        preference = PreferenceResponse(id="p", init_point="https://prod")

        assert preference.checkout_url(test_mode=True) == "https://prod"
