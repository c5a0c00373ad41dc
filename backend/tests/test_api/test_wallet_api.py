"""
API tests for the wallet and storefront catalog routers

Author: Mapu Team
Date: 2025-11-25
"""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from marketplace.main import app
from marketplace.core.auth import TokenUser, get_current_user
from marketplace.domain.catalog import CouponValidation
from marketplace.domain.store import WithdrawalRequest

SELLER = TokenUser(id='seller-1', email='tienda@example.com', role='seller')


@pytest.fixture
def client():
    app.dependency_overrides[get_current_user] = lambda: SELLER
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestWithdrawalEndpoints:
    @patch('marketplace.api.wallet.WithdrawalService')
    def test_create_withdrawal(self, mock_service_cls, client):
        # Arrange
        mock_service_cls.return_value.create_request.return_value = WithdrawalRequest(
            id='wr-1', seller_id='seller-1', amount=7500, payment_method='mp_alias',
        )

        # Act
        response = client.post('/api/v1/wallet/withdrawals', json={'amount': 7500, 'payment_method': 'mp_alias'})

        # Assert
        assert response.status_code == 200
        assert response.json()['data']['id'] == 'wr-1'
        mock_service_cls.return_value.create_request.assert_called_once_with('seller-1', 7500, 'mp_alias')

    @patch('marketplace.api.wallet.WithdrawalService')
    def test_create_without_banking_details(self, mock_service_cls, client):
        mock_service_cls.return_value.create_request.side_effect = ValueError('Banking details not found')

        response = client.post('/api/v1/wallet/withdrawals', json={'amount': 7500, 'payment_method': 'cbu_cvu'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'Banking details not found'

    def test_amount_must_be_positive(self, client):
        response = client.post('/api/v1/wallet/withdrawals', json={'amount': 0, 'payment_method': 'cbu_cvu'})

        assert response.status_code == 422

    @patch('marketplace.api.wallet.WithdrawalService')
    def test_cancel_is_scoped_to_seller(self, mock_service_cls, client):
        response = client.post('/api/v1/wallet/withdrawals/wr-1/cancel')

        assert response.status_code == 200
        mock_service_cls.return_value.cancel_request.assert_called_once_with('wr-1', 'seller-1')


class TestCatalogEndpoints:
    @patch('marketplace.api.catalog.CouponService')
    def test_coupon_code_is_uppercased(self, mock_service_cls, client):
        # Arrange
        mock_service_cls.return_value.validate_coupon.return_value = CouponValidation(
            is_valid=True, coupon_id='cp-1', discount_amount=200,
        )

        # Act
        response = client.post('/api/v1/catalog/coupons/validate', json={'code': 'verano10', 'cart_total': 2000})

        # Assert
        assert response.json()['data']['discount_amount'] == 200
        args = mock_service_cls.return_value.validate_coupon.call_args[0]
        assert args[:3] == ('VERANO10', 'seller-1', 2000)

    @patch('marketplace.api.catalog.PricingService')
    def test_tax_breakdown(self, mock_service_cls, client):
        mock_service_cls.return_value.get_tax_rate.return_value = 21.0

        response = client.get('/api/v1/catalog/tax/breakdown', params={'total': 1210})

        data = response.json()['data']
        assert data['net_amount'] == 1000.0
        assert data['tax_amount'] == 210.0
