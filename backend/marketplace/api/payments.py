"""
Payments API Endpoints
MercadoPago webhook and payment sync after the buyer returns

Security:
- The webhook is public (MercadoPago calls it); it only triggers a lookup
  against the MercadoPago API, never trusts the posted status.

Author: Mapu Team
Date: 2025-11-23
"""
import logging
from typing import Optional, Dict, Any

from fastapi import APIRouter, HTTPException, Depends, Request

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()


def _notification_payment_id(params: Dict[str, Any], body: Dict[str, Any]) -> Optional[str]:
    """
    Payment id from a MercadoPago notification

    Accepts both the webhook JSON ({"type": "payment", "data": {"id": ...}})
    and the IPN query string (?topic=payment&id=... or ?type=payment&data.id=...).
    """
    kind = body.get('type') or params.get('type') or params.get('topic')
    if kind != 'payment':
        return None

    data = body.get('data') if isinstance(body.get('data'), dict) else {}
    payment_id = data.get('id') or params.get('data.id') or params.get('id')
    return str(payment_id) if payment_id else None


@router.post("/webhook")
async def mercadopago_webhook(request: Request):
    """Receive MercadoPago notifications; only payment events are processed"""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    payment_id = _notification_payment_id(dict(request.query_params), body)
    if not payment_id:
        return {"status": "ignored"}

    try:
        service = PaymentService()
        result = await service.sync_payment(payment_id)

        return {
            "status": "success",
            "data": result
        }

    except LookupError as e:
        logger.warning(f"Webhook for unknown payment: {e}")
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Webhook processing failed for payment {payment_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing payment notification: {str(e)}")


@router.post("/{payment_id}/sync")
async def sync_payment(payment_id: str, user: TokenUser = Depends(get_current_user)):
    """Called by the app when it is reopened through a payment back URL"""
    try:
        service = PaymentService()
        result = await service.sync_payment(payment_id)

        return {
            "status": "success",
            "data": result
        }

    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error syncing payment: {str(e)}")
