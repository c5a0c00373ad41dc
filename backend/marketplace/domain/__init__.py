"""
Domain Layer - Business Entities

This layer contains Pydantic models representing marketplace rows and the
storefront REST payloads.

Author: Mapu Team
Date: 2025-11-17
"""
from marketplace.domain.order import Order, OrderItem, OrderItemInput, CreateOrderData
from marketplace.domain.catalog import (
    Category, CategoryInput, Coupon, CouponInput, CouponValidation,
    ShippingZone, ShippingMethod, ShippingRate, ShippingRateInput,
    ShippingCalculation, ShippingOption, HomeSection, SectionProduct, FeaturedProduct,
)
from marketplace.domain.store import (
    OfficialStore, StoreApplication, ApplicationData, SellerBalance, BankingDetails,
    WithdrawalRequest, WithdrawalStats, CommissionCalculation,
)
from marketplace.domain.settings import Setting, PlatformSettings, ArcaConfig, Invoice
from marketplace.domain.notification import Notification, PushToken, DispatchResult, NotificationPayload

__all__ = [
    'Order', 'OrderItem', 'OrderItemInput', 'CreateOrderData',
    'Category', 'CategoryInput', 'Coupon', 'CouponInput', 'CouponValidation',
    'ShippingZone', 'ShippingMethod', 'ShippingRate', 'ShippingRateInput',
    'ShippingCalculation', 'ShippingOption', 'HomeSection', 'SectionProduct', 'FeaturedProduct',
    'OfficialStore', 'StoreApplication', 'ApplicationData', 'SellerBalance', 'BankingDetails',
    'WithdrawalRequest', 'WithdrawalStats', 'CommissionCalculation',
    'Setting', 'PlatformSettings', 'ArcaConfig', 'Invoice',
    'Notification', 'PushToken', 'DispatchResult', 'NotificationPayload',
]
