"""
Storefront REST DTOs

Payloads exchanged with the storefront REST API (auth, shops, products,
categories, subscriptions). The API speaks camelCase; models accept both
spellings and serialize back to camelCase.

Author: Mapu Team
Date: 2025-11-17
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Dict, Any, Generic, TypeVar
from datetime import datetime


T = TypeVar('T')


class ApiModel(BaseModel):
    """Base for camelCase REST payloads"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra='ignore')

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a request body, dropping unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True, mode='json')


class PageMeta(ApiModel):
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0


class Page(ApiModel, Generic[T]):
    data: List[T] = Field(default_factory=list)
    meta: PageMeta = Field(default_factory=PageMeta)


# ============================================================================
# Auth
# ============================================================================

UserRole = Literal['client', 'retailer', 'wholesaler']


class RegisterDto(ApiModel):
    email: str
    password: str
    name: str
    phone: Optional[str] = None
    role: Optional[UserRole] = None
    province: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None


class LoginDto(ApiModel):
    email: str
    password: str


class UpdateLocationDto(ApiModel):
    province: str
    city: str
    address: Optional[str] = None


class User(ApiModel):
    id: str
    email: str
    name: str
    phone: Optional[str] = None
    role: str
    province: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    access_token: str
    user: User


# ============================================================================
# Shops
# ============================================================================

ShopType = Literal['retailer', 'wholesaler']


class OpeningHours(BaseModel):
    open: str
    close: str


class ShopSchedule(BaseModel):
    monday: Optional[OpeningHours] = None
    tuesday: Optional[OpeningHours] = None
    wednesday: Optional[OpeningHours] = None
    thursday: Optional[OpeningHours] = None
    friday: Optional[OpeningHours] = None
    saturday: Optional[OpeningHours] = None
    sunday: Optional[OpeningHours] = None


class CreateShopDto(ApiModel):
    name: str
    description: Optional[str] = None
    type: ShopType
    province: str
    city: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    schedule: Optional[ShopSchedule] = None


class UpdateShopDto(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ShopType] = None
    province: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    schedule: Optional[ShopSchedule] = None


class ShopFilters(ApiModel):
    type: Optional[ShopType] = None
    state: Optional[str] = None
    radius: Optional[float] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    open_now: Optional[bool] = None
    products: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class Shop(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    type: ShopType
    logo: Optional[str] = None
    banner: Optional[str] = None
    province: str
    city: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    schedule: Optional[ShopSchedule] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Products & categories
# ============================================================================

class CreateProductDto(ApiModel):
    name: str
    description: Optional[str] = None
    retail_price: Optional[float] = None
    wholesale_price: Optional[float] = None
    stock: int = 0
    sku: Optional[str] = None
    barcode: Optional[str] = None
    brand: Optional[str] = None
    characteristics: Optional[Dict[str, Any]] = None
    category_id: Optional[str] = None


class UpdateProductDto(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    retail_price: Optional[float] = None
    wholesale_price: Optional[float] = None
    stock: Optional[int] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    brand: Optional[str] = None
    characteristics: Optional[Dict[str, Any]] = None
    category_id: Optional[str] = None


class ProductFilters(ApiModel):
    search: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    in_stock: Optional[bool] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class Product(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    retail_price: Optional[float] = None
    wholesale_price: Optional[float] = None
    stock: int = 0
    sku: Optional[str] = None
    barcode: Optional[str] = None
    brand: Optional[str] = None
    characteristics: Optional[Dict[str, Any]] = None
    images: List[str] = Field(default_factory=list)
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateCategoryDto(ApiModel):
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[str] = None


class UpdateCategoryDto(ApiModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[str] = None


class ApiCategory(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    image: Optional[str] = None
    parent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================================
# Subscriptions
# ============================================================================

class CreateSubscriptionDto(ApiModel):
    plan_type: str
    payment_method: Optional[str] = None


class SubscriptionFilters(ApiModel):
    status: Optional[str] = None
    page: Optional[int] = None
    limit: Optional[int] = None


class Subscription(ApiModel):
    id: str
    user_id: str
    plan_type: str
    status: Literal['active', 'pending', 'cancelled', 'expired']
    amount: float
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
