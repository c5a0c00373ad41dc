"""
Checkout Service - order creation + MercadoPago preference

Flow:
1. Validate buyer/shipping form locally
2. Optional coupon (validate_coupon RPC) and shipping quote (calculate_shipping RPC)
3. Insert order + items
4. Create MercadoPago preference, store its id on the order
5. Return hosted checkout URL; the app moves to PaymentPending

There is no compensation step: an order whose preference could not be
created stays 'pending'.

Author: Mapu Team
Date: 2025-11-21
"""
import logging
from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, Field

from marketplace.core.config import settings
from marketplace.connectors.mercadopago_connector import (
    MercadoPagoConnector, CreatePreferenceData, PreferenceItem, Payer, PayerPhone, BackUrls,
)
from marketplace.domain.order import Order, OrderItemInput, CreateOrderData
from marketplace.repositories.order_repository import OrderRepository
from marketplace.repositories.coupon_repository import CouponRepository
from marketplace.repositories.shipping_repository import ShippingRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Por favor completa todos los campos requeridos"
EMPTY_CART_MESSAGE = "Tu carrito está vacío"
INVALID_COUPON_MESSAGE = "Cupón inválido"
SHIPPING_UNAVAILABLE_MESSAGE = "No hay envío disponible para esta provincia"


class CheckoutError(Exception):
    """Checkout could not be completed after the order was created"""

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message)
        self.order_id = order_id


class CheckoutForm(BaseModel):
    """Buyer and shipping data collected by the checkout screen"""

    full_name: str = ''
    email: str = ''
    phone: str = ''
    address: str = ''
    city: str = ''
    state: str = ''
    postal_code: Optional[str] = None
    notes: Optional[str] = None
    items: List[OrderItemInput] = Field(default_factory=list)
    coupon_code: Optional[str] = None
    shipping_method_id: Optional[str] = None


@dataclass
class CheckoutResult:
    order_id: str
    checkout_url: str
    preference_id: str
    total: float
    next_screen: str = 'PaymentPending'


def validate_form(form: CheckoutForm):
    """Raise ValueError with the message shown to the buyer"""
    required = [form.full_name, form.email, form.phone, form.address, form.city, form.state]
    if any(not value or not value.strip() for value in required):
        raise ValueError(REQUIRED_FIELDS_MESSAGE)
    if not form.items:
        raise ValueError(EMPTY_CART_MESSAGE)


def build_shipping_address(form: CheckoutForm) -> str:
    address = f"{form.address}, {form.city}, {form.state}"
    if form.postal_code:
        address += f" ({form.postal_code})"
    return address


def split_full_name(full_name: str):
    parts = full_name.split(' ')
    return parts[0], ' '.join(parts[1:])


class CheckoutService:
    """Runs the buy flow for a single authenticated buyer"""

    def __init__(self,
                 order_repo: Optional[OrderRepository] = None,
                 mercadopago: Optional[MercadoPagoConnector] = None,
                 coupon_repo: Optional[CouponRepository] = None,
                 shipping_repo: Optional[ShippingRepository] = None,
                 test_mode: Optional[bool] = None,
                 app_scheme: Optional[str] = None):
        self.order_repo = order_repo or OrderRepository()
        self.mercadopago = mercadopago or MercadoPagoConnector(settings.MERCADOPAGO_ACCESS_TOKEN)
        self.coupon_repo = coupon_repo or CouponRepository(self.order_repo.client)
        self.shipping_repo = shipping_repo or ShippingRepository(self.order_repo.client)
        self.test_mode = settings.MERCADOPAGO_TEST_MODE if test_mode is None else test_mode
        self.app_scheme = app_scheme or settings.APP_SCHEME

    def back_url(self, outcome: str, order_id: str) -> str:
        return f"{self.app_scheme}://payment/{outcome}?order_id={order_id}"

    def _quote_shipping(self, form: CheckoutForm, subtotal: float) -> float:
        row = self.shipping_repo.calculate(form.state, form.shipping_method_id, subtotal)
        if not row or row.get('error_message'):
            raise ValueError((row or {}).get('error_message') or SHIPPING_UNAVAILABLE_MESSAGE)
        if row.get('is_free'):
            return 0.0
        return float(row.get('shipping_cost') or 0)

    def _validate_coupon(self, buyer_id: str, form: CheckoutForm, subtotal: float):
        row = self.coupon_repo.validate(
            form.coupon_code.strip().upper(),
            buyer_id,
            subtotal,
            product_ids=[item.product_id for item in form.items],
        )
        if not row or not row.get('is_valid'):
            raise ValueError((row or {}).get('error_message') or INVALID_COUPON_MESSAGE)
        return row.get('coupon_id'), float(row.get('discount_amount') or 0)

    def build_preference(self, order: Order, form: CheckoutForm) -> CreatePreferenceData:
        """
        Preference payload for an order

        One line per cart item, plus a shipping line. With a coupon the
        provider cannot take negative lines, so the order is sent as a single
        line for its total.
        """
        currency = settings.MERCADOPAGO_CURRENCY
        if order.discount > 0:
            items = [PreferenceItem(
                title=f"Pedido {order.order_number or order.id}",
                quantity=1,
                currency_id=currency,
                unit_price=order.total,
            )]
        else:
            items = [
                PreferenceItem(
                    title=item.product_name,
                    description=item.product_description,
                    picture_url=item.product_image_url,
                    quantity=item.quantity,
                    currency_id=currency,
                    unit_price=item.unit_price,
                )
                for item in form.items
            ]
            if order.shipping_cost > 0:
                items.append(PreferenceItem(
                    title="Envío", quantity=1, currency_id=currency, unit_price=order.shipping_cost,
                ))

        name, surname = split_full_name(form.full_name)
        return CreatePreferenceData(
            items=items,
            payer=Payer(name=name, surname=surname, email=form.email, phone=PayerPhone(number=form.phone)),
            back_urls=BackUrls(
                success=self.back_url('success', order.id),
                failure=self.back_url('failure', order.id),
                pending=self.back_url('pending', order.id),
            ),
            auto_return='approved',
            external_reference=order.id,
        )

    async def checkout(self, buyer_id: str, form: CheckoutForm) -> CheckoutResult:
        """
        Create the order and its payment preference

        Raises:
            ValueError: incomplete form, invalid coupon or no shipping
            CheckoutError: the provider did not return a preference
        """
        validate_form(form)

        subtotal = sum(item.subtotal for item in form.items)
        shipping_cost = self._quote_shipping(form, subtotal) if form.shipping_method_id else 0.0

        coupon_id, discount = None, 0.0
        if form.coupon_code and form.coupon_code.strip():
            coupon_id, discount = self._validate_coupon(buyer_id, form, subtotal)

        order = self.order_repo.create_order(CreateOrderData(
            buyer_id=buyer_id,
            items=form.items,
            buyer_name=form.full_name,
            buyer_email=form.email,
            buyer_phone=form.phone,
            shipping_address=build_shipping_address(form),
            shipping_city=form.city,
            shipping_state=form.state,
            shipping_postal_code=form.postal_code or None,
            buyer_notes=form.notes or None,
            shipping_cost=shipping_cost,
            discount=discount,
        ))
        logger.info(f"Order {order.id} created for buyer {buyer_id} (total {order.total})")

        if coupon_id:
            try:
                self.coupon_repo.apply(coupon_id, buyer_id, order.id, discount)
            except Exception as e:
                logger.error(f"Error applying coupon {coupon_id} to order {order.id}: {e}")

        preference = await self.mercadopago.create_preference(self.build_preference(order, form))
        if not preference:
            logger.error(f"Order {order.id} left pending: payment preference failed")
            raise CheckoutError("Failed to create payment preference", order_id=order.id)

        self.order_repo.update_order_payment(order.id, {'mercadopago_preference_id': preference.id})

        return CheckoutResult(
            order_id=order.id,
            checkout_url=preference.checkout_url(self.test_mode),
            preference_id=preference.id,
            total=order.total,
        )
