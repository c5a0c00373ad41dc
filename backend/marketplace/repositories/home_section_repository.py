"""
Home Section Repository - home page curation (sections, section products,
featured products)

Author: Mapu Team
Date: 2025-11-20
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.catalog import HomeSection, SectionProduct, FeaturedProduct


class HomeSectionRepository:
    """Repository for home_sections, home_section_products and product featuring"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # ==================== SECTIONS ====================

    def find_sections(self) -> List[HomeSection]:
        response = (
            self.client.table('home_sections')
            .select('*')
            .order('display_order')
            .execute()
        )
        return [HomeSection(**row) for row in (response.data or [])]

    def update_section(self, section_id: str, values: Dict[str, Any]):
        self.client.table('home_sections').update(values).eq('id', section_id).execute()

    # ==================== SECTION PRODUCTS ====================

    def find_section_products(self, section_id: str) -> List[SectionProduct]:
        response = (
            self.client.table('home_section_products')
            .select('*')
            .eq('section_id', section_id)
            .order('display_order')
            .execute()
        )
        return [SectionProduct(**row) for row in (response.data or [])]

    def insert_section_product(self, section_id: str, product_id: str, display_order: int):
        self.client.table('home_section_products').insert({
            'section_id': section_id,
            'product_id': product_id,
            'display_order': display_order,
        }).execute()

    def update_section_product(self, item_id: str, values: Dict[str, Any]):
        self.client.table('home_section_products').update(values).eq('id', item_id).execute()

    def delete_section_product(self, item_id: str):
        self.client.table('home_section_products').delete().eq('id', item_id).execute()

    # ==================== FEATURED PRODUCTS ====================

    def find_active_products(self) -> List[FeaturedProduct]:
        """Active products with featuring columns, ordered by featured_order"""
        response = (
            self.client.table('products')
            .select('id, name, price, image_url, is_featured, featured_order, featured_until, sellers(store_name)')
            .eq('status', 'active')
            .order('featured_order')
            .execute()
        )

        products = []
        for row in response.data or []:
            seller = row.pop('sellers', None) or {}
            row['seller_name'] = seller.get('store_name') or 'Sin tienda'
            row['featured_order'] = row.get('featured_order') or 0
            products.append(FeaturedProduct(**row))
        return products

    def update_product(self, product_id: str, values: Dict[str, Any]):
        self.client.table('products').update(values).eq('id', product_id).execute()
