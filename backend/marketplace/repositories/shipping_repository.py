"""
Shipping Repository - zones, methods, rates and the calculate_shipping RPC

Author: Mapu Team
Date: 2025-11-19
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.catalog import ShippingZone, ShippingMethod, ShippingRate


class ShippingRepository:
    """Repository for shipping configuration"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    def find_zones(self, active_only: bool = False) -> List[ShippingZone]:
        query = self.client.table('shipping_zones').select('*')
        if active_only:
            query = query.eq('is_active', True)
        response = query.order('name').execute()
        return [ShippingZone(**row) for row in (response.data or [])]

    def find_methods(self, active_only: bool = False) -> List[ShippingMethod]:
        query = self.client.table('shipping_methods').select('*')
        if active_only:
            query = query.eq('is_active', True)
        response = query.order('estimated_days_min').execute()
        return [ShippingMethod(**row) for row in (response.data or [])]

    def find_rates(self) -> List[ShippingRate]:
        """Rates joined with their zone and method"""
        response = (
            self.client.table('shipping_rates')
            .select('*, zone:shipping_zones(*), method:shipping_methods(*)')
            .order('zone_id')
            .execute()
        )
        return [ShippingRate(**row) for row in (response.data or [])]

    def find_zone_by_province(self, province: str) -> Optional[ShippingZone]:
        response = (
            self.client.table('shipping_zones')
            .select('*')
            .contains('provinces', [province])
            .eq('is_active', True)
            .limit(1)
            .execute()
        )
        return ShippingZone(**response.data[0]) if response.data else None

    def insert_rate(self, rate_data: Dict[str, Any]):
        self.client.table('shipping_rates').insert(rate_data).execute()

    def update_rate(self, rate_id: str, rate_data: Dict[str, Any]):
        self.client.table('shipping_rates').update(rate_data).eq('id', rate_id).execute()

    def set_rate_active(self, rate_id: str, is_active: bool):
        self.client.table('shipping_rates').update({'is_active': is_active}).eq('id', rate_id).execute()

    def delete_rate(self, rate_id: str):
        self.client.table('shipping_rates').delete().eq('id', rate_id).execute()

    def calculate(self, province: str, method_id: str, cart_total: float,
                  total_weight_kg: float = 1) -> Optional[Dict[str, Any]]:
        """
        Call calculate_shipping RPC

        Returns:
            First result row (shipping_cost, is_free, estimated_days, error_message) or None
        """
        response = self.client.rpc('calculate_shipping', {
            'p_province': province,
            'p_method_id': method_id,
            'p_cart_total': cart_total,
            'p_total_weight_kg': total_weight_kg,
        }).execute()

        rows = response.data or []
        return rows[0] if rows else None

    def find_active_tax_rate(self) -> Optional[float]:
        response = (
            self.client.table('tax_config')
            .select('rate')
            .eq('is_active', True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get('rate')
