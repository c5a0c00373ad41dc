"""
Order Repository - Data Access Layer for Orders

Handles all Supabase queries for orders / order_items and returns Order
domain models.

Author: Mapu Team
Date: 2025-11-18
"""
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.order import Order, OrderItem, CreateOrderData, STATUS_TIMESTAMPS


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderRepository:
    """
    Repository for Order data access

    All table calls for orders are centralized here.
    """

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    def create_order(self, data: CreateOrderData) -> Order:
        """
        Insert an order and its items

        seller_id comes from the first item (single-seller carts). The items
        insert is not transactional with the order insert: if it fails the
        order row stays behind in 'pending'.

        Returns:
            The created Order with its items
        """
        order_row = {
            'buyer_id': data.buyer_id,
            'seller_id': data.items[0].seller_id,
            'status': 'pending',
            'payment_method': 'mercadopago',
            'subtotal': data.subtotal,
            'shipping_cost': data.shipping_cost,
            'tax': data.tax,
            'discount': data.discount,
            'total': data.total,
            'buyer_name': data.buyer_name,
            'buyer_email': data.buyer_email,
            'buyer_phone': data.buyer_phone,
            'shipping_address': data.shipping_address,
            'shipping_city': data.shipping_city,
            'shipping_state': data.shipping_state,
            'shipping_postal_code': data.shipping_postal_code,
            'buyer_notes': data.buyer_notes,
        }

        response = self.client.table('orders').insert(order_row).execute()
        order = dict(response.data[0])

        items = [
            {
                'order_id': order['id'],
                'product_id': item.product_id,
                'product_name': item.product_name,
                'product_description': item.product_description,
                'product_image_url': item.product_image_url,
                'quantity': item.quantity,
                'unit_price': item.unit_price,
                'subtotal': item.subtotal,
                'seller_id': item.seller_id,
            }
            for item in data.items
        ]
        items_response = self.client.table('order_items').insert(items).execute()

        order['items'] = [OrderItem(**row) for row in (items_response.data or [])]
        return Order(**order)

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID with its items

        Returns:
            Order or None if not found
        """
        response = (
            self.client.table('orders')
            .select('*')
            .eq('id', order_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        items = (
            self.client.table('order_items')
            .select('*')
            .eq('order_id', order_id)
            .execute()
        )

        order = dict(response.data[0])
        order['items'] = [OrderItem(**row) for row in (items.data or [])]
        return Order(**order)

    def get_user_orders(self, user_id: str) -> List[Order]:
        """Orders placed by a buyer, newest first"""
        response = (
            self.client.table('orders')
            .select('*')
            .eq('buyer_id', user_id)
            .order('created_at', desc=True)
            .execute()
        )
        return [Order(**row) for row in (response.data or [])]

    def get_seller_orders(self, seller_id: str) -> List[Order]:
        """Orders received by a seller, newest first"""
        response = (
            self.client.table('orders')
            .select('*')
            .eq('seller_id', seller_id)
            .order('created_at', desc=True)
            .execute()
        )
        return [Order(**row) for row in (response.data or [])]

    def get_all_orders(self, limit: int = 100) -> List[Order]:
        """Latest orders across the marketplace (CRM)"""
        response = (
            self.client.table('orders')
            .select('*')
            .order('created_at', desc=True)
            .limit(limit)
            .execute()
        )
        return [Order(**row) for row in (response.data or [])]

    def update_order_status(self, order_id: str, status: str, notes: Optional[str] = None) -> bool:
        """
        Update order status

        Stamps paid_at / shipped_at / delivered_at / cancelled_at for the
        matching status and stores seller notes when given.
        """
        update_data: Dict[str, Any] = {'status': status}

        timestamp_column = STATUS_TIMESTAMPS.get(status)
        if timestamp_column:
            update_data[timestamp_column] = utc_now_iso()

        if notes:
            update_data['seller_notes'] = notes

        self.client.table('orders').update(update_data).eq('id', order_id).execute()
        return True

    def update_order_payment(self, order_id: str, payment_data: Dict[str, Any]) -> bool:
        """
        Update order with MercadoPago info

        Args:
            payment_data: any of mercadopago_payment_id, mercadopago_preference_id,
                mercadopago_status, mercadopago_status_detail, status, paid_at
        """
        clean = {key: value for key, value in payment_data.items() if value is not None}
        if not clean:
            return False

        self.client.table('orders').update(clean).eq('id', order_id).execute()
        return True
