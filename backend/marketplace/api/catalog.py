"""
Catalog API Endpoints (storefront side)
Coupon validation, shipping quotes and IVA breakdown used by the cart

Author: Mapu Team
Date: 2025-11-23
"""
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, Field

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.services.catalog_admin_service import CouponService, ShippingService
from marketplace.services.pricing_service import (
    PricingService, calculate_tax_breakdown, format_discount, format_shipping_cost,
)

router = APIRouter()


class CouponValidationRequest(BaseModel):
    code: str
    cart_total: float = Field(..., ge=0)
    product_ids: Optional[List[str]] = None
    category_ids: Optional[List[str]] = None


@router.get("/coupons")
async def get_available_coupons():
    """Active coupons already started and not expired"""
    try:
        service = CouponService()
        coupons = service.get_available_coupons()

        return {
            "status": "success",
            "count": len(coupons),
            "data": [
                {**coupon.model_dump(mode='json'), "discount_label": format_discount(coupon)}
                for coupon in coupons
            ]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching coupons: {str(e)}")


@router.post("/coupons/validate")
async def validate_coupon(request: CouponValidationRequest, user: TokenUser = Depends(get_current_user)):
    try:
        service = CouponService()
        validation = service.validate_coupon(
            request.code.upper(), user.id, request.cart_total, request.product_ids, request.category_ids
        )

        return {
            "status": "success",
            "data": validation.model_dump()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error validating coupon: {str(e)}")


@router.get("/shipping/options")
async def get_shipping_options(
    province: str = Query(..., description="Destination province"),
    cart_total: float = Query(..., ge=0),
    weight_kg: float = Query(1, gt=0)
):
    """Quotes for every active shipping method that delivers to the province"""
    try:
        service = ShippingService()
        options = service.get_shipping_options(province, cart_total, weight_kg)

        return {
            "status": "success",
            "count": len(options),
            "data": [
                {**option.model_dump(), "cost_label": format_shipping_cost(option.cost, option.is_free)}
                for option in options
            ]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error calculating shipping: {str(e)}")


@router.get("/shipping/zone")
async def get_zone_by_province(province: str = Query(...)):
    try:
        service = ShippingService()
        zone = service.get_zone_by_province(province)

        if not zone:
            raise HTTPException(status_code=404, detail=f"No shipping zone for {province}")

        return {
            "status": "success",
            "data": zone.model_dump()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching shipping zone: {str(e)}")


@router.get("/tax/breakdown")
async def get_tax_breakdown(total: float = Query(..., ge=0)):
    """Net and IVA amounts for an IVA-inclusive price"""
    try:
        service = PricingService()
        tax_rate = service.get_tax_rate()

        return {
            "status": "success",
            "data": {"tax_rate": tax_rate, **calculate_tax_breakdown(total, tax_rate)}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error calculating taxes: {str(e)}")
