"""
Home Curation Service - home page sections and featured products

Reordering swaps two neighbours and rewrites the whole list as 1..n, one
update per row.

Author: Mapu Team
Date: 2025-11-22
"""
import logging
from typing import List, Optional, Literal, Dict, Any, Callable, Sequence

from marketplace.domain.catalog import HomeSection, SectionProduct, FeaturedProduct
from marketplace.repositories.home_section_repository import HomeSectionRepository

logger = logging.getLogger(__name__)

Direction = Literal['up', 'down']


def swap_neighbours(items: Sequence, item_id: str, direction: Direction) -> Optional[list]:
    """
    New ordering with `item_id` moved one slot up or down

    Returns:
        Reordered list, or None when the move is not possible
    """
    ids = [item.id for item in items]
    if item_id not in ids:
        raise LookupError(f"Item {item_id} not found")

    index = ids.index(item_id)
    target = index - 1 if direction == 'up' else index + 1
    if target < 0 or target >= len(items):
        return None

    reordered = list(items)
    reordered[index], reordered[target] = reordered[target], reordered[index]
    return reordered


class HomeCurationService:
    def __init__(self, repo: Optional[HomeSectionRepository] = None):
        self.repo = repo or HomeSectionRepository()

    @staticmethod
    def _renumber(items: Sequence, update: Callable[[str, Dict[str, Any]], None], column: str):
        for i, item in enumerate(items):
            update(item.id, {column: i + 1})

    # ==================== SECTIONS ====================

    def list_sections(self) -> List[HomeSection]:
        return self.repo.find_sections()

    def set_section_active(self, section_id: str, is_active: bool):
        self.repo.update_section(section_id, {'is_active': is_active})

    def update_section(self, section: HomeSection):
        self.repo.update_section(section.id, {
            'title': section.title,
            'subtitle': section.subtitle,
            'max_products': section.max_products,
            'layout_type': section.layout_type,
        })

    def move_section(self, section_id: str, direction: Direction) -> bool:
        reordered = swap_neighbours(self.repo.find_sections(), section_id, direction)
        if reordered is None:
            return False
        self._renumber(reordered, self.repo.update_section, 'display_order')
        return True

    # ==================== SECTION PRODUCTS ====================

    def list_section_products(self, section_id: str) -> List[SectionProduct]:
        return self.repo.find_section_products(section_id)

    def add_product_to_section(self, section_id: str, product_id: str) -> int:
        """Append a product at the end of a section; returns its display_order"""
        current = self.repo.find_section_products(section_id)
        display_order = max(item.display_order for item in current) + 1 if current else 1
        self.repo.insert_section_product(section_id, product_id, display_order)
        return display_order

    def remove_product_from_section(self, item_id: str):
        self.repo.delete_section_product(item_id)

    def move_section_product(self, section_id: str, item_id: str, direction: Direction) -> bool:
        reordered = swap_neighbours(self.repo.find_section_products(section_id), item_id, direction)
        if reordered is None:
            return False
        self._renumber(reordered, self.repo.update_section_product, 'display_order')
        return True

    def update_product_label(self, item_id: str, label: Optional[str], color: Optional[str]):
        self.repo.update_section_product(item_id, {
            'custom_label': label or None,
            'custom_label_color': color,
        })

    # ==================== FEATURED PRODUCTS ====================

    def list_products(self) -> List[FeaturedProduct]:
        return self.repo.find_active_products()

    def list_featured(self) -> List[FeaturedProduct]:
        featured = [product for product in self.repo.find_active_products() if product.is_featured]
        return sorted(featured, key=lambda product: product.featured_order)

    def add_to_featured(self, product_id: str) -> int:
        featured = self.list_featured()
        featured_order = max(product.featured_order for product in featured) + 1 if featured else 1
        self.repo.update_product(product_id, {'is_featured': True, 'featured_order': featured_order})
        return featured_order

    def remove_from_featured(self, product_id: str):
        self.repo.update_product(product_id, {
            'is_featured': False,
            'featured_order': 0,
            'featured_until': None,
        })

    def move_featured(self, product_id: str, direction: Direction) -> bool:
        reordered = swap_neighbours(self.list_featured(), product_id, direction)
        if reordered is None:
            return False
        self._renumber(reordered, self.repo.update_product, 'featured_order')
        return True
