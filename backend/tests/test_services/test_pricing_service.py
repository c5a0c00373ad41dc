"""
Unit tests for pricing helpers and PricingService

Author: Mapu Team
Date: 2025-11-25
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

from marketplace.domain.catalog import Coupon
from marketplace.services.pricing_service import (
    PricingService, format_ars, format_discount, format_shipping_cost, calculate_tax_breakdown,
    is_coupon_expired, has_coupon_started, fallback_commission,
)


def make_coupon(**overrides):
    values = {
        'id': 'coupon-1',
        'code': 'VERANO10',
        'name': 'Verano',
        'discount_type': 'percentage',
        'discount_value': 10,
        'starts_at': datetime(2025, 1, 1, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return Coupon(**values)


class TestFormatting:
    def test_format_ars(self):
        assert format_ars(1234.5) == '1.234,50'
        assert format_ars(0) == '0,00'
        assert format_ars(1500000) == '1.500.000,00'

    def test_percentage_discount(self):
        assert format_discount(make_coupon()) == '10% OFF'

    def test_percentage_discount_with_cap(self):
        assert format_discount(make_coupon(max_discount=500)) == '10% OFF (máx $500)'

    def test_fixed_discount(self):
        assert format_discount(make_coupon(discount_type='fixed', discount_value=1500)) == '$1500 OFF'

    def test_fractional_discount(self):
        assert format_discount(make_coupon(discount_value=12.5)) == '12.5% OFF'

    def test_shipping_cost_label(self):
        assert format_shipping_cost(1200, False) == '$1.200,00'
        assert format_shipping_cost(1200, True) == 'Gratis'


class TestCouponWindow:
    def test_without_expiry_never_expires(self):
        assert is_coupon_expired(make_coupon()) is False

    def test_expired(self):
        coupon = make_coupon(expires_at=datetime(2025, 3, 1, tzinfo=timezone.utc))

        assert is_coupon_expired(coupon, now=datetime(2025, 3, 2, tzinfo=timezone.utc)) is True
        assert is_coupon_expired(coupon, now=datetime(2025, 2, 1, tzinfo=timezone.utc)) is False

    def test_not_started(self):
        coupon = make_coupon(starts_at=datetime(2025, 6, 1, tzinfo=timezone.utc))

        assert has_coupon_started(coupon, now=datetime(2025, 5, 31, tzinfo=timezone.utc)) is False


class TestTaxAndCommission:
    def test_tax_breakdown_default_rate(self):
        breakdown = calculate_tax_breakdown(1210)

        assert breakdown == {'net_amount': 1000.0, 'tax_amount': 210.0, 'gross_amount': 1210}

    def test_fallback_commission(self):
        calculation = fallback_commission(1000, 3)

        assert calculation.subtotal == 3000
        assert calculation.commission_rate == 10
        assert calculation.commission_amount == 300
        assert calculation.seller_payout == 2700


class TestPricingService:
    def test_tax_rate_defaults_when_missing(self):
        shipping_repo = MagicMock()
        shipping_repo.find_active_tax_rate.return_value = None

        assert PricingService(shipping_repo, MagicMock()).get_tax_rate() == 21

    def test_tax_rate_defaults_on_error(self):
        shipping_repo = MagicMock()
        shipping_repo.find_active_tax_rate.side_effect = Exception('db down')

        assert PricingService(shipping_repo, MagicMock()).get_tax_rate() == 21

    def test_commission_from_rpc(self):
        withdrawal_repo = MagicMock()
        withdrawal_repo.calculate_payout.return_value = {
            'subtotal': 2000, 'commission_rate': 15, 'commission_amount': 300, 'seller_payout': 1700,
        }

        calculation = PricingService(MagicMock(), withdrawal_repo).calculate_commission('p1', 's1', 'c1', 1000, 2)

        assert calculation.commission_rate == 15
        assert calculation.seller_payout == 1700

    def test_commission_falls_back_on_error(self):
        withdrawal_repo = MagicMock()
        withdrawal_repo.calculate_payout.side_effect = Exception('rpc down')

        calculation = PricingService(MagicMock(), withdrawal_repo).calculate_commission('p1', 's1', 'c1', 1000, 2)

        assert calculation.commission_amount == 200
        assert calculation.seller_payout == 1800

    def test_commission_none_without_rows(self):
        withdrawal_repo = MagicMock()
        withdrawal_repo.calculate_payout.return_value = None

        assert PricingService(MagicMock(), withdrawal_repo).calculate_commission('p1', 's1', 'c1', 1000, 2) is None
