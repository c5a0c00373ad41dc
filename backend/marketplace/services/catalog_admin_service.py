"""
Catalog Admin Service - categories, coupons and shipping rates

CRM form rules live here (required fields, commission range, slug, null
defaults). The storefront-side coupon and shipping lookups share the same
repositories and are exposed from CouponService / ShippingService.

Author: Mapu Team
Date: 2025-11-22
"""
import logging
import re
import unicodedata
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from marketplace.domain.catalog import (
    Category, CategoryInput, Coupon, CouponInput, CouponValidation,
    ShippingZone, ShippingMethod, ShippingRate, ShippingRateInput,
    ShippingCalculation, ShippingOption,
)
from marketplace.repositories.category_repository import CategoryRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.repositories.shipping_repository import ShippingRepository

logger = logging.getLogger(__name__)

COUPON_VALIDATION_ERROR = 'Error al validar cupón'
SHIPPING_CALCULATION_ERROR = 'Error al calcular envío'


def slugify(name: str) -> str:
    """'Electrónica y Más' -> 'electronica-y-mas'"""
    text = unicodedata.normalize('NFD', name.lower())
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    text = re.sub(r'[^a-z0-9]+', '-', text)
    return text.strip('-')


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# Categories
# ============================================================================

class CategoryService:
    def __init__(self, repo: Optional[CategoryRepository] = None):
        self.repo = repo or CategoryRepository()

    def list_categories(self) -> List[Category]:
        return self.repo.find_all(with_counts=True)

    @staticmethod
    def validate(form: CategoryInput):
        if not form.name.strip():
            raise ValueError('El nombre es obligatorio')
        if form.commission_rate < 0 or form.commission_rate > 100:
            raise ValueError('La comisión debe estar entre 0 y 100')

    def save_category(self, form: CategoryInput, category_id: Optional[str] = None):
        """
        Create or update a category

        New categories go to the end of the list (display_order = count).
        """
        self.validate(form)

        data: Dict[str, Any] = {
            'name': form.name,
            'slug': slugify(form.name),
            'description': form.description or None,
            'commission_rate': form.commission_rate,
            'is_active': form.is_active,
        }

        if category_id:
            data['updated_at'] = _now_iso()
            self.repo.update(category_id, data)
        else:
            data['display_order'] = len(self.repo.find_all(with_counts=False))
            self.repo.insert(data)

    def set_active(self, category_id: str, is_active: bool):
        self.repo.update(category_id, {'is_active': is_active})

    def delete_category(self, category_id: str):
        category = self.repo.find_by_id(category_id)
        if not category:
            raise LookupError(f"Category {category_id} not found")
        if category.product_count > 0:
            raise ValueError(
                f"No puedes eliminar esta categoría porque tiene {category.product_count} productos asociados."
            )
        self.repo.delete(category_id)


# ============================================================================
# Coupons
# ============================================================================

class CouponService:
    def __init__(self, repo: Optional[CouponRepository] = None):
        self.repo = repo or CouponRepository()

    # CRM

    def list_coupons(self) -> List[Coupon]:
        return self.repo.find_all()

    def save_coupon(self, form: CouponInput):
        """Upper-cases the code; empty limits and expiry are stored as NULL"""
        if not form.code or not form.name:
            raise ValueError('El código y el nombre son obligatorios')

        data = {
            'code': form.code.upper(),
            'name': form.name,
            'description': form.description,
            'discount_type': form.discount_type,
            'discount_value': form.discount_value,
            'min_purchase': form.min_purchase or 0,
            'max_discount': form.max_discount or None,
            'usage_limit': form.usage_limit or None,
            'usage_per_user': form.usage_per_user or 1,
            'starts_at': form.starts_at or _now_iso(),
            'expires_at': form.expires_at or None,
            'is_active': form.is_active,
            'applies_to': form.applies_to,
            'first_purchase_only': form.first_purchase_only,
            'new_users_only': form.new_users_only,
        }

        if form.id:
            self.repo.update(form.id, data)
        else:
            self.repo.insert(data)

    def set_active(self, coupon_id: str, is_active: bool):
        self.repo.set_active(coupon_id, is_active)

    def delete_coupon(self, coupon_id: str):
        self.repo.delete(coupon_id)

    # Storefront

    def validate_coupon(self, code: str, user_id: str, cart_total: float,
                        product_ids: Optional[List[str]] = None,
                        category_ids: Optional[List[str]] = None) -> CouponValidation:
        try:
            row = self.repo.validate(code, user_id, cart_total, product_ids, category_ids)
        except Exception as e:
            logger.error(f"Error validating coupon: {e}")
            row = None

        if not row:
            return CouponValidation(is_valid=False, discount_amount=0, error_message=COUPON_VALIDATION_ERROR)

        return CouponValidation(
            is_valid=bool(row.get('is_valid')),
            coupon_id=row.get('coupon_id'),
            discount_amount=row.get('discount_amount') or 0,
            error_message=row.get('error_message'),
        )

    def apply_coupon(self, coupon_id: str, user_id: str, order_id: str, discount_amount: float) -> bool:
        try:
            return self.repo.apply(coupon_id, user_id, order_id, discount_amount)
        except Exception as e:
            logger.error(f"Error applying coupon: {e}")
            return False

    def get_coupon_by_code(self, code: str) -> Optional[Coupon]:
        return self.repo.find_by_code(code)

    def get_user_coupon_usage(self, user_id: str, coupon_id: str) -> int:
        return self.repo.count_user_usage(user_id, coupon_id)

    def get_available_coupons(self) -> List[Coupon]:
        return self.repo.find_available()


# ============================================================================
# Shipping
# ============================================================================

class ShippingService:
    def __init__(self, repo: Optional[ShippingRepository] = None):
        self.repo = repo or ShippingRepository()

    # CRM

    def list_zones(self) -> List[ShippingZone]:
        return self.repo.find_zones()

    def list_methods(self) -> List[ShippingMethod]:
        return self.repo.find_methods()

    def list_rates(self) -> List[ShippingRate]:
        return self.repo.find_rates()

    def save_rate(self, form: ShippingRateInput):
        if not form.zone_id or not form.method_id:
            raise ValueError('Debes seleccionar una zona y un método de envío')

        data = {
            'zone_id': form.zone_id,
            'method_id': form.method_id,
            'base_price': form.base_price or 0,
            'price_per_kg': form.price_per_kg or 0,
            'free_shipping_min': form.free_shipping_min or None,
            'max_weight_kg': form.max_weight_kg or None,
            'is_active': form.is_active,
        }

        if form.id:
            self.repo.update_rate(form.id, data)
        else:
            self.repo.insert_rate(data)

    def set_rate_active(self, rate_id: str, is_active: bool):
        self.repo.set_rate_active(rate_id, is_active)

    def delete_rate(self, rate_id: str):
        self.repo.delete_rate(rate_id)

    # Storefront

    def calculate_shipping(self, province: str, method_id: str, cart_total: float,
                           total_weight_kg: float = 1) -> ShippingCalculation:
        try:
            row = self.repo.calculate(province, method_id, cart_total, total_weight_kg)
        except Exception as e:
            logger.error(f"Error calculating shipping: {e}")
            row = None

        if not row:
            return ShippingCalculation(error_message=SHIPPING_CALCULATION_ERROR)
        return ShippingCalculation(**row)

    def get_shipping_options(self, province: str, cart_total: float,
                             total_weight_kg: float = 1) -> List[ShippingOption]:
        """Quote every active method; methods that cannot ship there are dropped"""
        options = []
        for method in self.repo.find_methods(active_only=True):
            calculation = self.calculate_shipping(province, method.id, cart_total, total_weight_kg)
            if calculation.error_message:
                continue
            options.append(ShippingOption(
                method=method,
                cost=calculation.shipping_cost,
                is_free=calculation.is_free,
                estimated_days=calculation.estimated_days,
            ))
        return options

    def get_zone_by_province(self, province: str) -> Optional[ShippingZone]:
        return self.repo.find_zone_by_province(province)
