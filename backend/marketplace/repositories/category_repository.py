"""
Category Repository - marketplace categories with product counts

Author: Mapu Team
Date: 2025-11-19
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.catalog import Category


class CategoryRepository:
    """Repository for categories"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    def count_products(self, category_id: str) -> int:
        response = (
            self.client.table('products')
            .select('id', count='exact')
            .eq('category_id', category_id)
            .execute()
        )
        return response.count or 0

    def find_all(self, with_counts: bool = True) -> List[Category]:
        """
        Categories ordered by display_order

        Args:
            with_counts: fill product_count (one count query per category)
        """
        response = (
            self.client.table('categories')
            .select('*')
            .order('display_order')
            .execute()
        )

        categories = []
        for row in response.data or []:
            category = Category(**row)
            if with_counts:
                category.product_count = self.count_products(category.id)
            categories.append(category)
        return categories

    def find_by_id(self, category_id: str) -> Optional[Category]:
        response = (
            self.client.table('categories')
            .select('*')
            .eq('id', category_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        category = Category(**response.data[0])
        category.product_count = self.count_products(category_id)
        return category

    def insert(self, category_data: Dict[str, Any]):
        self.client.table('categories').insert(category_data).execute()

    def update(self, category_id: str, category_data: Dict[str, Any]):
        self.client.table('categories').update(category_data).eq('id', category_id).execute()

    def delete(self, category_id: str):
        self.client.table('categories').delete().eq('id', category_id).execute()
