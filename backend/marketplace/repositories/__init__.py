"""
Repository Layer - Data Access

This layer handles all Supabase table/RPC calls and returns domain models.
Repositories abstract away query-builder details from business logic.

Author: Mapu Team
Date: 2025-11-18
"""
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.repositories.shipping_repository import ShippingRepository
from marketplace.repositories.category_repository import CategoryRepository
from marketplace.repositories.home_section_repository import HomeSectionRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.repositories.withdrawal_repository import WithdrawalRepository
from marketplace.repositories.settings_repository import SettingsRepository
from marketplace.repositories.notification_repository import NotificationRepository

__all__ = [
    'OrderRepository',
    'CouponRepository',
    'ShippingRepository',
    'CategoryRepository',
    'HomeSectionRepository',
    'StoreRepository',
    'WithdrawalRepository',
    'SettingsRepository',
    'NotificationRepository',
]
