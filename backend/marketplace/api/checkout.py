"""
Checkout API Endpoints
Creates the order and returns the MercadoPago checkout URL

Author: Mapu Team
Date: 2025-11-23
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, HTTPException, Depends

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.services.checkout_service import CheckoutService, CheckoutForm, CheckoutError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
async def checkout(form: CheckoutForm, user: TokenUser = Depends(get_current_user)):
    """
    Buy flow for the authenticated buyer

    Returns:
    - order_id, checkout_url, preference_id, total
    - next_screen: always "PaymentPending"
    """
    try:
        service = CheckoutService()
        result = await service.checkout(user.id, form)

        return {
            "status": "success",
            "data": asdict(result)
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CheckoutError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "order_id": e.order_id})
    except Exception as e:
        logger.error(f"Checkout error for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing checkout: {str(e)}")
