"""
Payment Service - syncs MercadoPago payment results onto orders

Called from the payment webhook and when the buyer comes back through a
back URL.

Author: Mapu Team
Date: 2025-11-21
"""
import logging
from typing import Dict, Any, Optional

from marketplace.core.config import settings
from marketplace.connectors.mercadopago_connector import MercadoPagoConnector
from marketplace.repositories.order_repository import OrderRepository, utc_now_iso

logger = logging.getLogger(__name__)

# MercadoPago payment status -> order status
PAYMENT_STATUS_MAP = {
    'approved': 'paid',
    'rejected': 'cancelled',
    'cancelled': 'cancelled',
    'refunded': 'refunded',
    'charged_back': 'refunded',
}


def map_payment_status(payment_status: Optional[str]) -> str:
    return PAYMENT_STATUS_MAP.get(payment_status or '', 'pending')


class PaymentService:
    def __init__(self, order_repo: Optional[OrderRepository] = None,
                 mercadopago: Optional[MercadoPagoConnector] = None):
        self.order_repo = order_repo or OrderRepository()
        self.mercadopago = mercadopago or MercadoPagoConnector(settings.MERCADOPAGO_ACCESS_TOKEN)

    async def sync_payment(self, payment_id: str) -> Dict[str, Any]:
        """
        Copy a payment's status onto the order in its external_reference

        Raises:
            LookupError: payment unknown to MercadoPago or not linked to an order
        """
        payment = await self.mercadopago.get_payment_info(payment_id)
        if not payment:
            raise LookupError(f"Payment {payment_id} not found")

        order_id = payment.get('external_reference')
        if not order_id:
            raise LookupError(f"Payment {payment_id} has no order reference")

        payment_status = payment.get('status')
        order_status = map_payment_status(payment_status)

        self.order_repo.update_order_payment(order_id, {
            'mercadopago_payment_id': str(payment.get('id', payment_id)),
            'mercadopago_status': payment_status,
            'mercadopago_status_detail': payment.get('status_detail'),
            'status': order_status,
            'paid_at': utc_now_iso() if order_status == 'paid' else None,
        })
        logger.info(f"Order {order_id}: payment {payment_id} {payment_status} -> {order_status}")

        return {
            'order_id': order_id,
            'payment_id': str(payment.get('id', payment_id)),
            'payment_status': payment_status,
            'order_status': order_status,
        }
