"""
Pricing Service - coupons, shipping, IVA and commission arithmetic

Display helpers are plain functions; the lookups that hit Supabase live on
PricingService and fall back to defaults when the database call fails.

Author: Mapu Team
Date: 2025-11-21
"""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from marketplace.domain.catalog import Coupon
from marketplace.domain.store import CommissionCalculation
from marketplace.repositories.shipping_repository import ShippingRepository
from marketplace.repositories.withdrawal_repository import WithdrawalRepository

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 21.0
DEFAULT_COMMISSION_RATE = 10.0


def _plain_number(value: float) -> str:
    """10.0 -> '10', 12.5 -> '12.5'"""
    return f"{value:g}" if float(value).is_integer() else str(value)


def format_ars(amount: float) -> str:
    """es-AR currency text with two decimals: 1234.5 -> '1.234,50'"""
    text = f"{amount:,.2f}"
    return text.replace(',', '_').replace('.', ',').replace('_', '.')


def format_discount(coupon: Coupon) -> str:
    if coupon.discount_type == 'percentage':
        text = f"{_plain_number(coupon.discount_value)}% OFF"
        if coupon.max_discount:
            text += f" (máx ${_plain_number(coupon.max_discount)})"
        return text
    return f"${_plain_number(coupon.discount_value)} OFF"


def is_coupon_expired(coupon: Coupon, now: Optional[datetime] = None) -> bool:
    if not coupon.expires_at:
        return False
    return coupon.expires_at < (now or datetime.now(timezone.utc))


def has_coupon_started(coupon: Coupon, now: Optional[datetime] = None) -> bool:
    return coupon.starts_at <= (now or datetime.now(timezone.utc))


def format_shipping_cost(cost: float, is_free: bool) -> str:
    if is_free:
        return 'Gratis'
    return f"${format_ars(cost)}"


def calculate_tax_breakdown(total: float, tax_rate: float = DEFAULT_TAX_RATE) -> Dict[str, float]:
    """
    Split an IVA-inclusive price into net and tax amounts

    Returns:
        {'net_amount', 'tax_amount', 'gross_amount'} rounded to cents
    """
    net_amount = total / (1 + tax_rate / 100)
    tax_amount = total - net_amount
    return {
        'net_amount': round(net_amount, 2),
        'tax_amount': round(tax_amount, 2),
        'gross_amount': total,
    }


def fallback_commission(unit_price: float, quantity: int,
                        rate: float = DEFAULT_COMMISSION_RATE) -> CommissionCalculation:
    subtotal = unit_price * quantity
    commission_amount = subtotal * rate / 100
    return CommissionCalculation(
        subtotal=subtotal,
        commission_rate=rate,
        commission_amount=commission_amount,
        seller_payout=subtotal - commission_amount,
    )


class PricingService:
    """Lookups backed by tax_config and the calculate_seller_payout RPC"""

    def __init__(self, shipping_repo: Optional[ShippingRepository] = None,
                 withdrawal_repo: Optional[WithdrawalRepository] = None):
        self.shipping_repo = shipping_repo or ShippingRepository()
        self.withdrawal_repo = withdrawal_repo or WithdrawalRepository()

    def get_tax_rate(self) -> float:
        try:
            return self.shipping_repo.find_active_tax_rate() or DEFAULT_TAX_RATE
        except Exception as e:
            logger.error(f"Error fetching tax rate: {e}")
            return DEFAULT_TAX_RATE

    def calculate_commission(self, product_id: str, seller_id: str, category_id: str,
                             unit_price: float, quantity: int) -> Optional[CommissionCalculation]:
        """
        Seller payout for a sale

        Falls back to a flat 10% commission when the RPC fails.
        """
        try:
            row = self.withdrawal_repo.calculate_payout(product_id, seller_id, category_id, unit_price, quantity)
        except Exception as e:
            logger.error(f"Error calculating commission: {e}")
            return fallback_commission(unit_price, quantity)

        return CommissionCalculation(**row) if row else None
