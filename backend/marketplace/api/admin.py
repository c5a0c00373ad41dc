"""
Admin API - CRM operations
Orders overview, official stores, store applications, seller withdrawals,
platform settings and ARCA invoicing

Author: Mapu Team
Date: 2025-11-24
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel

from marketplace.core.auth import TokenUser, require_admin
from marketplace.domain.order import OrderStatus
from marketplace.domain.settings import PlatformSettings, ArcaConfig
from marketplace.domain.store import WithdrawalStatus
from marketplace.repositories.order_repository import OrderRepository
from marketplace.services.store_admin_service import StoreAdminService
from marketplace.services.withdrawal_service import WithdrawalService
from marketplace.services.settings_service import SettingsService

router = APIRouter(dependencies=[Depends(require_admin)])


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None


class ActiveToggle(BaseModel):
    is_active: bool


class ApplicationRejection(BaseModel):
    reason: Optional[str] = None


class WithdrawalStatusUpdate(BaseModel):
    status: WithdrawalStatus
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    transaction_reference: Optional[str] = None


# ============================================================================
# Orders
# ============================================================================

@router.get("/orders")
async def get_all_orders(limit: int = Query(100, ge=1, le=1000)):
    """Latest orders across the marketplace"""
    try:
        repo = OrderRepository()
        orders = repo.get_all_orders(limit)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.patch("/orders/{order_id}/status")
async def update_order_status(order_id: str, update: OrderStatusUpdate):
    try:
        repo = OrderRepository()
        repo.update_order_status(order_id, update.status, update.notes)

        return {
            "status": "success",
            "message": f"Order {order_id} updated to {update.status}"
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order: {str(e)}")


# ============================================================================
# Official stores
# ============================================================================

@router.get("/stores")
async def list_official_stores():
    try:
        service = StoreAdminService()
        stores = service.list_stores()

        return {
            "status": "success",
            "count": len(stores),
            "data": [store.model_dump(mode='json') for store in stores]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching stores: {str(e)}")


@router.patch("/stores/{store_id}/active")
async def set_store_active(store_id: str, toggle: ActiveToggle):
    try:
        service = StoreAdminService()
        service.set_store_active(store_id, toggle.is_active)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating store: {str(e)}")


@router.post("/stores/{store_id}/suspend")
async def suspend_store(store_id: str):
    """Marks the store suspended and hides it from the storefront"""
    try:
        service = StoreAdminService()
        service.suspend_store(store_id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error suspending store: {str(e)}")


# ============================================================================
# Store applications
# ============================================================================

@router.get("/store-applications")
async def list_store_applications():
    """Applications still pending or under review"""
    try:
        service = StoreAdminService()
        applications = service.list_applications()

        return {
            "status": "success",
            "count": len(applications),
            "data": [application.model_dump(mode='json') for application in applications]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching applications: {str(e)}")


@router.post("/store-applications/{application_id}/approve")
async def approve_store_application(application_id: str):
    """Creates the official store (with policies and metrics) and approves the application"""
    try:
        service = StoreAdminService()
        store = service.approve_application(application_id)

        return {
            "status": "success",
            "data": store.model_dump(mode='json')
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al aprobar aplicación: {str(e)}")


@router.post("/store-applications/{application_id}/reject")
async def reject_store_application(application_id: str, rejection: ApplicationRejection):
    try:
        service = StoreAdminService()
        service.reject_application(application_id, rejection.reason)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error al rechazar aplicación: {str(e)}")


# ============================================================================
# Withdrawals
# ============================================================================

@router.get("/withdrawals")
async def list_withdrawals(status: Optional[WithdrawalStatus] = None,
                           limit: int = Query(100, ge=1, le=1000)):
    try:
        service = WithdrawalService()
        requests = service.list_requests(status, limit)

        return {
            "status": "success",
            "count": len(requests),
            "data": requests
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching withdrawals: {str(e)}")


@router.get("/withdrawals/stats")
async def get_withdrawal_stats():
    try:
        service = WithdrawalService()
        return {
            "status": "success",
            "data": service.get_stats().model_dump()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching withdrawal stats: {str(e)}")


@router.patch("/withdrawals/{request_id}/status")
async def update_withdrawal_status(request_id: str, update: WithdrawalStatusUpdate,
                                   admin: TokenUser = Depends(require_admin)):
    """Approve, process, complete or reject a payout (rejection needs a reason)"""
    try:
        service = WithdrawalService()
        service.update_status(
            request_id,
            update.status,
            admin.id,
            notes=update.admin_notes,
            rejection_reason=update.rejection_reason,
            transaction_reference=update.transaction_reference,
        )
        return {"status": "success"}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating withdrawal: {str(e)}")


# ============================================================================
# Settings
# ============================================================================

@router.get("/settings")
async def get_all_settings():
    try:
        service = SettingsService()
        stored = service.get_all()

        return {
            "status": "success",
            "data": {key: setting.model_dump(mode='json') for key, setting in stored.items()}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching settings: {str(e)}")


@router.get("/settings/platform")
async def get_platform_settings():
    try:
        service = SettingsService()
        return {
            "status": "success",
            "data": service.load_platform_settings().model_dump()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching settings: {str(e)}")


@router.put("/settings/platform")
async def save_platform_settings(form: PlatformSettings, admin: TokenUser = Depends(require_admin)):
    """Writes every key; all_succeeded is False when any single update failed"""
    try:
        service = SettingsService()
        all_succeeded = service.save_platform_settings(form, admin.id)

        return {
            "status": "success" if all_succeeded else "partial",
            "all_succeeded": all_succeeded
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving settings: {str(e)}")


# ============================================================================
# Invoicing (ARCA)
# ============================================================================

@router.get("/invoicing/config")
async def get_arca_config():
    try:
        service = SettingsService()
        return {
            "status": "success",
            "data": service.get_arca_config().model_dump()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching ARCA config: {str(e)}")


@router.put("/invoicing/config")
async def save_arca_config(config: ArcaConfig):
    try:
        service = SettingsService()
        service.save_arca_config(config)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving ARCA config: {str(e)}")


@router.get("/invoicing/invoices")
async def list_invoices(limit: int = Query(100, ge=1, le=1000)):
    try:
        service = SettingsService()
        invoices = service.list_invoices(limit)

        return {
            "status": "success",
            "count": len(invoices),
            "data": [
                {
                    **invoice.model_dump(mode='json'),
                    "formatted_number": invoice.formatted_number,
                    "type_name": invoice.type_name,
                }
                for invoice in invoices
            ]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching invoices: {str(e)}")
