"""
Orders API Endpoints
Buyer and seller views of marketplace orders

Author: Mapu Team
Date: 2025-11-23
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from pydantic import BaseModel

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.domain.order import OrderStatus
from marketplace.repositories.order_repository import OrderRepository

router = APIRouter()


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    notes: Optional[str] = None


def _can_view(order, user: TokenUser) -> bool:
    return user.role == 'admin' or user.id in (order.buyer_id, order.seller_id)


@router.get("")
async def get_my_orders(user: TokenUser = Depends(get_current_user)):
    """Orders placed by the authenticated buyer, newest first"""
    try:
        repo = OrderRepository()
        orders = repo.get_user_orders(user.id)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/seller")
async def get_seller_orders(user: TokenUser = Depends(get_current_user)):
    """Orders received by the authenticated seller, newest first"""
    try:
        repo = OrderRepository()
        orders = repo.get_seller_orders(user.id)

        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching seller orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(order_id: str, user: TokenUser = Depends(get_current_user)):
    """Single order with its items (buyer, seller or admin only)"""
    try:
        repo = OrderRepository()
        order = repo.get_order_by_id(order_id)

        if not order or not _can_view(order, user):
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.patch("/{order_id}/status")
async def update_order_status(order_id: str, update: OrderStatusUpdate,
                              user: TokenUser = Depends(get_current_user)):
    """Seller (or admin) moves an order forward: processing, shipped, delivered..."""
    try:
        repo = OrderRepository()
        order = repo.get_order_by_id(order_id)

        if not order or (user.role != 'admin' and order.seller_id != user.id):
            raise HTTPException(status_code=404, detail=f"Order {order_id} not found")

        repo.update_order_status(order_id, update.status, update.notes)

        return {
            "status": "success",
            "message": f"Order {order_id} updated to {update.status}"
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order: {str(e)}")
