"""
Catalog Domain Models

Categories, coupons, shipping and home-page curation rows managed from the CRM
and read by the storefront.

Author: Mapu Team
Date: 2025-11-18
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime


class Category(BaseModel):
    """Marketplace category with its commission rate (percent)"""

    id: str
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    commission_rate: float = Field(10.0, description="Commission percent charged on sales")
    is_active: bool = True
    display_order: int = 0
    product_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, extra='ignore')


class CategoryInput(BaseModel):
    """Category form as submitted from the CRM"""

    name: str = ''
    description: Optional[str] = None
    commission_rate: float = 10.0
    is_active: bool = True


# ============================================================================
# Coupons
# ============================================================================

DiscountType = Literal['percentage', 'fixed']
AppliesTo = Literal['all', 'category', 'product', 'seller']


class Coupon(BaseModel):
    """Discount coupon"""

    id: str
    code: str
    name: str
    description: Optional[str] = None
    discount_type: DiscountType = 'percentage'
    discount_value: float = 0
    min_purchase: float = 0
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    usage_per_user: int = 1
    current_usage: int = 0
    starts_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool = True
    applies_to: AppliesTo = 'all'
    applies_to_ids: Optional[List[str]] = None
    first_purchase_only: bool = False
    new_users_only: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, extra='ignore')


class CouponInput(BaseModel):
    """Coupon form; empty optional numbers are stored as NULL"""

    id: Optional[str] = None
    code: str = ''
    name: str = ''
    description: Optional[str] = None
    discount_type: DiscountType = 'percentage'
    discount_value: float = 10
    min_purchase: Optional[float] = 0
    max_discount: Optional[float] = None
    usage_limit: Optional[int] = None
    usage_per_user: Optional[int] = 1
    starts_at: Optional[str] = None
    expires_at: Optional[str] = None
    is_active: bool = True
    applies_to: AppliesTo = 'all'
    first_purchase_only: bool = False
    new_users_only: bool = False


class CouponValidation(BaseModel):
    """Result of the validate_coupon RPC"""

    is_valid: bool
    coupon_id: Optional[str] = None
    discount_amount: float = 0
    error_message: Optional[str] = None


# ============================================================================
# Shipping
# ============================================================================

class ShippingZone(BaseModel):
    id: str
    name: str
    provinces: List[str] = Field(default_factory=list)
    is_active: bool = True

    model_config = ConfigDict(extra='ignore')


class ShippingMethod(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    carrier: Optional[str] = None
    estimated_days_min: int = 0
    estimated_days_max: int = 0
    is_active: bool = True

    model_config = ConfigDict(extra='ignore')


class ShippingRate(BaseModel):
    id: str
    zone_id: str
    method_id: str
    base_price: float = 0
    price_per_kg: float = 0
    free_shipping_min: Optional[float] = None
    max_weight_kg: Optional[float] = None
    is_active: bool = True
    zone: Optional[ShippingZone] = None
    method: Optional[ShippingMethod] = None

    model_config = ConfigDict(extra='ignore')


class ShippingRateInput(BaseModel):
    id: Optional[str] = None
    zone_id: Optional[str] = None
    method_id: Optional[str] = None
    base_price: Optional[float] = 0
    price_per_kg: Optional[float] = 0
    free_shipping_min: Optional[float] = None
    max_weight_kg: Optional[float] = None
    is_active: bool = True


class ShippingCalculation(BaseModel):
    """Result of the calculate_shipping RPC"""

    shipping_cost: float = 0
    is_free: bool = False
    estimated_days: str = ''
    error_message: Optional[str] = None


class ShippingOption(BaseModel):
    method: ShippingMethod
    cost: float
    is_free: bool
    estimated_days: str


# ============================================================================
# Home page curation
# ============================================================================

class HomeSection(BaseModel):
    id: str
    title: str
    subtitle: Optional[str] = None
    section_type: Optional[str] = None
    layout_type: Optional[str] = None
    max_products: int = 10
    display_order: int = 0
    is_active: bool = True

    model_config = ConfigDict(extra='ignore')


class SectionProduct(BaseModel):
    id: str
    section_id: str
    product_id: str
    display_order: int = 0
    custom_label: Optional[str] = None
    custom_label_color: Optional[str] = None

    model_config = ConfigDict(extra='ignore')


class FeaturedProduct(BaseModel):
    id: str
    name: str
    price: float = 0
    image_url: Optional[str] = None
    is_featured: bool = False
    featured_order: int = 0
    featured_until: Optional[datetime] = None
    seller_name: str = 'Sin tienda'

    model_config = ConfigDict(extra='ignore')
