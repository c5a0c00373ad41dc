"""
Coupon Repository - Data Access Layer for coupons and coupon_usage

Validation and application are delegated to database functions
(validate_coupon, apply_coupon).

Author: Mapu Team
Date: 2025-11-19
"""
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.catalog import Coupon


class CouponRepository:
    """Repository for coupon data access"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # ==================== CRM ====================

    def find_all(self) -> List[Coupon]:
        """All coupons, newest first"""
        response = (
            self.client.table('coupons')
            .select('*')
            .order('created_at', desc=True)
            .execute()
        )
        return [Coupon(**row) for row in (response.data or [])]

    def insert(self, coupon_data: Dict[str, Any]):
        self.client.table('coupons').insert(coupon_data).execute()

    def update(self, coupon_id: str, coupon_data: Dict[str, Any]):
        self.client.table('coupons').update(coupon_data).eq('id', coupon_id).execute()

    def set_active(self, coupon_id: str, is_active: bool):
        self.client.table('coupons').update({'is_active': is_active}).eq('id', coupon_id).execute()

    def delete(self, coupon_id: str):
        self.client.table('coupons').delete().eq('id', coupon_id).execute()

    # ==================== STOREFRONT ====================

    def validate(self, code: str, user_id: str, cart_total: float,
                 product_ids: Optional[List[str]] = None,
                 category_ids: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        """
        Call validate_coupon RPC

        Returns:
            First result row or None when the function returned nothing
        """
        response = self.client.rpc('validate_coupon', {
            'p_code': code,
            'p_user_id': user_id,
            'p_cart_total': cart_total,
            'p_product_ids': product_ids or None,
            'p_category_ids': category_ids or None,
        }).execute()

        rows = response.data or []
        return rows[0] if rows else None

    def apply(self, coupon_id: str, user_id: str, order_id: str, discount_amount: float) -> bool:
        """Call apply_coupon RPC (records usage against the order)"""
        response = self.client.rpc('apply_coupon', {
            'p_coupon_id': coupon_id,
            'p_user_id': user_id,
            'p_order_id': order_id,
            'p_discount_amount': discount_amount,
        }).execute()
        return response.data is True

    def find_by_code(self, code: str) -> Optional[Coupon]:
        """Case-insensitive lookup by code"""
        response = (
            self.client.table('coupons')
            .select('*')
            .ilike('code', code)
            .limit(1)
            .execute()
        )
        return Coupon(**response.data[0]) if response.data else None

    def count_user_usage(self, user_id: str, coupon_id: str) -> int:
        response = (
            self.client.table('coupon_usage')
            .select('id', count='exact')
            .eq('user_id', user_id)
            .eq('coupon_id', coupon_id)
            .execute()
        )
        return response.count or 0

    def find_available(self, now: Optional[datetime] = None) -> List[Coupon]:
        """Active coupons that already started and have not expired"""
        now_iso = (now or datetime.now(timezone.utc)).isoformat()
        response = (
            self.client.table('coupons')
            .select('*')
            .eq('is_active', True)
            .lte('starts_at', now_iso)
            .or_(f'expires_at.is.null,expires_at.gt.{now_iso}')
            .order('created_at', desc=True)
            .execute()
        )
        return [Coupon(**row) for row in (response.data or [])]
