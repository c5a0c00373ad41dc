"""
Admin Catalog API - CRM endpoints for categories, coupons, shipping rates
and home page curation

All endpoints require an admin session.

Author: Mapu Team
Date: 2025-11-24
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from marketplace.core.auth import require_admin
from marketplace.domain.catalog import CategoryInput, CouponInput, ShippingRateInput, HomeSection
from marketplace.services.catalog_admin_service import CategoryService, CouponService, ShippingService
from marketplace.services.home_curation_service import HomeCurationService, Direction

router = APIRouter(dependencies=[Depends(require_admin)])


class MoveRequest(BaseModel):
    direction: Direction


class SectionProductCreate(BaseModel):
    product_id: str


class ProductLabelUpdate(BaseModel):
    custom_label: Optional[str] = None
    custom_label_color: Optional[str] = None


class ActiveToggle(BaseModel):
    is_active: bool


# ============================================================================
# Categories
# ============================================================================

@router.get("/categories")
async def list_categories():
    """Categories ordered by display_order, with product counts"""
    try:
        service = CategoryService()
        categories = service.list_categories()

        return {
            "status": "success",
            "count": len(categories),
            "data": [category.model_dump(mode='json') for category in categories]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.post("/categories")
async def create_category(form: CategoryInput):
    try:
        service = CategoryService()
        service.save_category(form)
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al crear: {str(e)}")


@router.put("/categories/{category_id}")
async def update_category(category_id: str, form: CategoryInput):
    try:
        service = CategoryService()
        service.save_category(form, category_id)
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al actualizar: {str(e)}")


@router.patch("/categories/{category_id}/active")
async def set_category_active(category_id: str, toggle: ActiveToggle):
    try:
        service = CategoryService()
        service.set_active(category_id, toggle.is_active)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@router.delete("/categories/{category_id}")
async def delete_category(category_id: str):
    """Refused while the category still has products"""
    try:
        service = CategoryService()
        service.delete_category(category_id)
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al eliminar: {str(e)}")


# ============================================================================
# Coupons
# ============================================================================

@router.get("/coupons")
async def list_coupons():
    try:
        service = CouponService()
        coupons = service.list_coupons()

        return {
            "status": "success",
            "count": len(coupons),
            "data": [coupon.model_dump(mode='json') for coupon in coupons]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching coupons: {str(e)}")


@router.post("/coupons")
async def save_coupon(form: CouponInput):
    """Create (no id) or update (with id) a coupon"""
    try:
        service = CouponService()
        service.save_coupon(form)
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al guardar cupón: {str(e)}")


@router.patch("/coupons/{coupon_id}/active")
async def set_coupon_active(coupon_id: str, toggle: ActiveToggle):
    try:
        service = CouponService()
        service.set_active(coupon_id, toggle.is_active)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating coupon: {str(e)}")


@router.delete("/coupons/{coupon_id}")
async def delete_coupon(coupon_id: str):
    try:
        service = CouponService()
        service.delete_coupon(coupon_id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting coupon: {str(e)}")


# ============================================================================
# Shipping
# ============================================================================

@router.get("/shipping")
async def get_shipping_config():
    """Zones, methods and rates (joined) for the shipping page"""
    try:
        service = ShippingService()

        return {
            "status": "success",
            "data": {
                "zones": [zone.model_dump() for zone in service.list_zones()],
                "methods": [method.model_dump() for method in service.list_methods()],
                "rates": [rate.model_dump() for rate in service.list_rates()],
            }
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching shipping config: {str(e)}")


@router.post("/shipping/rates")
async def save_shipping_rate(form: ShippingRateInput):
    try:
        service = ShippingService()
        service.save_rate(form)
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al guardar tarifa: {str(e)}")


@router.patch("/shipping/rates/{rate_id}/active")
async def set_rate_active(rate_id: str, toggle: ActiveToggle):
    try:
        service = ShippingService()
        service.set_rate_active(rate_id, toggle.is_active)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating rate: {str(e)}")


@router.delete("/shipping/rates/{rate_id}")
async def delete_shipping_rate(rate_id: str):
    try:
        service = ShippingService()
        service.delete_rate(rate_id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting rate: {str(e)}")


# ============================================================================
# Home sections
# ============================================================================

@router.get("/home-sections")
async def list_home_sections():
    try:
        service = HomeCurationService()
        sections = service.list_sections()

        return {
            "status": "success",
            "data": [section.model_dump() for section in sections]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching sections: {str(e)}")


@router.put("/home-sections/{section_id}")
async def update_home_section(section_id: str, section: HomeSection):
    """Edit title, subtitle, max_products and layout_type"""
    try:
        service = HomeCurationService()
        service.update_section(section.model_copy(update={'id': section_id}))
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating section: {str(e)}")


@router.patch("/home-sections/{section_id}/active")
async def set_section_active(section_id: str, toggle: ActiveToggle):
    try:
        service = HomeCurationService()
        service.set_section_active(section_id, toggle.is_active)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating section: {str(e)}")


@router.post("/home-sections/{section_id}/move")
async def move_home_section(section_id: str, move: MoveRequest):
    try:
        service = HomeCurationService()
        moved = service.move_section(section_id, move.direction)
        return {"status": "success", "moved": moved}

    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error moving section: {str(e)}")


@router.get("/home-sections/{section_id}/products")
async def list_section_products(section_id: str):
    try:
        service = HomeCurationService()
        items = service.list_section_products(section_id)

        return {
            "status": "success",
            "data": [item.model_dump() for item in items]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching section products: {str(e)}")


@router.post("/home-sections/{section_id}/products")
async def add_section_product(section_id: str, request: SectionProductCreate):
    try:
        service = HomeCurationService()
        display_order = service.add_product_to_section(section_id, request.product_id)
        return {"status": "success", "display_order": display_order}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding product: {str(e)}")


@router.delete("/home-sections/{section_id}/products/{item_id}")
async def remove_section_product(section_id: str, item_id: str):
    try:
        service = HomeCurationService()
        service.remove_product_from_section(item_id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing product: {str(e)}")


@router.post("/home-sections/{section_id}/products/{item_id}/move")
async def move_section_product(section_id: str, item_id: str, move: MoveRequest):
    try:
        service = HomeCurationService()
        moved = service.move_section_product(section_id, item_id, move.direction)
        return {"status": "success", "moved": moved}

    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error moving product: {str(e)}")


@router.patch("/home-sections/{section_id}/products/{item_id}/label")
async def update_section_product_label(section_id: str, item_id: str, label: ProductLabelUpdate):
    try:
        service = HomeCurationService()
        service.update_product_label(item_id, label.custom_label, label.custom_label_color)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating label: {str(e)}")


# ============================================================================
# Featured products
# ============================================================================

@router.get("/featured-products")
async def list_featured_products():
    """Featured products in order plus every active product available to feature"""
    try:
        service = HomeCurationService()
        products = service.list_products()

        return {
            "status": "success",
            "data": {
                "featured": [p.model_dump(mode='json') for p in service.list_featured()],
                "products": [p.model_dump(mode='json') for p in products],
            }
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching featured products: {str(e)}")


@router.post("/featured-products/{product_id}")
async def add_featured_product(product_id: str):
    try:
        service = HomeCurationService()
        featured_order = service.add_to_featured(product_id)
        return {"status": "success", "featured_order": featured_order}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error featuring product: {str(e)}")


@router.delete("/featured-products/{product_id}")
async def remove_featured_product(product_id: str):
    try:
        service = HomeCurationService()
        service.remove_from_featured(product_id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing featured product: {str(e)}")


@router.post("/featured-products/{product_id}/move")
async def move_featured_product(product_id: str, move: MoveRequest):
    try:
        service = HomeCurationService()
        moved = service.move_featured(product_id, move.direction)
        return {"status": "success", "moved": moved}

    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error moving featured product: {str(e)}")
