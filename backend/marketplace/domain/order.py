"""
Order Domain Models

Represents order-related rows of the marketplace (orders, order_items) and
the input collected by the checkout flow.

Author: Mapu Team
Date: 2025-11-18
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime


OrderStatus = Literal['pending', 'paid', 'processing', 'shipped', 'delivered', 'cancelled', 'refunded']
PaymentMethod = Literal['mercadopago', 'cash', 'transfer', 'other']

# Timestamp column written when an order enters each status
STATUS_TIMESTAMPS = {
    'paid': 'paid_at',
    'shipped': 'shipped_at',
    'delivered': 'delivered_at',
    'cancelled': 'cancelled_at',
}


class OrderItem(BaseModel):
    """
    Order Item domain model - a line of an order

    product_name/description/image are copied at order time so the line
    survives product edits.
    """

    id: str = Field(..., description="Order item ID")
    order_id: str = Field(..., description="Parent order ID")
    product_id: Optional[str] = Field(None, description="Product ID")
    product_name: str = Field(..., description="Product name at order time")
    product_description: Optional[str] = None
    product_image_url: Optional[str] = None
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    unit_price: float = Field(..., description="Price per unit", ge=0)
    subtotal: float = Field(..., description="unit_price * quantity", ge=0)
    seller_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    """
    Order domain model

    total = subtotal + shipping_cost + tax - discount
    """

    id: str = Field(..., description="Order ID")
    order_number: Optional[str] = Field(None, description="Human readable number (DB generated)")
    buyer_id: str = Field(..., description="Buyer profile ID")
    seller_id: Optional[str] = Field(None, description="Seller profile ID")
    status: OrderStatus = 'pending'
    payment_method: PaymentMethod = 'mercadopago'

    subtotal: float = 0
    shipping_cost: float = 0
    tax: float = 0
    discount: float = 0
    total: float = 0

    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    buyer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    shipping_country: Optional[str] = None

    mercadopago_payment_id: Optional[str] = None
    mercadopago_preference_id: Optional[str] = None
    mercadopago_status: Optional[str] = None

    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    buyer_notes: Optional[str] = None
    seller_notes: Optional[str] = None

    paid_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    items: List[OrderItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, extra='ignore')

    def to_dict(self) -> dict:
        """Convert to JSON-friendly dictionary"""
        return self.model_dump(mode='json')


class OrderItemInput(BaseModel):
    """A cart line sent to checkout / create_order"""

    product_id: str
    product_name: str
    product_description: Optional[str] = None
    product_image_url: Optional[str] = None
    quantity: int = Field(1, ge=1)
    unit_price: float = Field(..., ge=0)
    seller_id: Optional[str] = None

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


class CreateOrderData(BaseModel):
    """Input for OrderRepository.create_order"""

    buyer_id: str
    items: List[OrderItemInput] = Field(..., min_length=1)
    buyer_name: Optional[str] = None
    buyer_email: Optional[str] = None
    buyer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    shipping_postal_code: Optional[str] = None
    buyer_notes: Optional[str] = None
    shipping_cost: float = Field(0, ge=0)
    tax: float = Field(0, ge=0)
    discount: float = Field(0, ge=0)

    @property
    def subtotal(self) -> float:
        return sum(item.subtotal for item in self.items)

    @property
    def total(self) -> float:
        return self.subtotal + self.shipping_cost + self.tax - self.discount
