"""
Wallet API Endpoints
Seller balance, banking details, withdrawal requests and official store
applications

Author: Mapu Team
Date: 2025-11-24
"""
from typing import Optional, Dict

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, Field

from marketplace.core.auth import TokenUser, get_current_user
from marketplace.domain.store import BankingDetails, ApplicationData, WithdrawalMethod
from marketplace.services.withdrawal_service import WithdrawalService
from marketplace.services.store_admin_service import StoreAdminService
from marketplace.services.pricing_service import PricingService

router = APIRouter()


class WithdrawalCreate(BaseModel):
    amount: float = Field(..., gt=0)
    payment_method: WithdrawalMethod


class StoreApplicationCreate(BaseModel):
    application_data: ApplicationData
    documents: Optional[Dict[str, str]] = None


@router.get("/balance")
async def get_balance(user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        return {
            "status": "success",
            "data": {
                **service.get_balance(user.id).model_dump(),
                "minimum_withdrawal_amount": service.get_minimum_withdrawal_amount(),
            }
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching balance: {str(e)}")


@router.get("/transactions")
async def get_transactions(limit: int = Query(50, ge=1, le=500), user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        transactions = service.get_transactions(user.id, limit)

        return {
            "status": "success",
            "count": len(transactions),
            "data": transactions
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching transactions: {str(e)}")


@router.get("/banking-details")
async def get_banking_details(user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        details = service.get_banking_details(user.id)

        return {
            "status": "success",
            "data": details.model_dump() if details else None
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching banking details: {str(e)}")


@router.put("/banking-details")
async def update_banking_details(details: BankingDetails, user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        service.update_banking_details(user.id, details)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating banking details: {str(e)}")


@router.get("/withdrawals")
async def get_my_withdrawals(user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        requests = service.list_seller_requests(user.id)

        return {
            "status": "success",
            "count": len(requests),
            "data": [request.model_dump(mode='json') for request in requests]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching withdrawals: {str(e)}")


@router.post("/withdrawals")
async def create_withdrawal(request: WithdrawalCreate, user: TokenUser = Depends(get_current_user)):
    try:
        service = WithdrawalService()
        withdrawal = service.create_request(user.id, request.amount, request.payment_method)

        return {
            "status": "success",
            "data": withdrawal.model_dump(mode='json')
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating withdrawal: {str(e)}")


@router.post("/withdrawals/{request_id}/cancel")
async def cancel_withdrawal(request_id: str, user: TokenUser = Depends(get_current_user)):
    """Cancel a request that is still pending"""
    try:
        service = WithdrawalService()
        service.cancel_request(request_id, user.id)
        return {"status": "success"}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error cancelling withdrawal: {str(e)}")


@router.get("/commission")
async def calculate_commission(
    product_id: str = Query(...),
    category_id: str = Query(...),
    unit_price: float = Query(..., ge=0),
    quantity: int = Query(1, ge=1),
    user: TokenUser = Depends(get_current_user)
):
    """Payout preview for a sale of the seller's product"""
    try:
        service = PricingService()
        calculation = service.calculate_commission(product_id, user.id, category_id, unit_price, quantity)

        if not calculation:
            raise HTTPException(status_code=404, detail="Commission could not be calculated")

        return {
            "status": "success",
            "data": calculation.model_dump()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error calculating commission: {str(e)}")


@router.post("/store-applications")
async def submit_store_application(request: StoreApplicationCreate, user: TokenUser = Depends(get_current_user)):
    """Apply for an official store; reviewed from the CRM"""
    try:
        service = StoreAdminService()
        application = service.submit_application(user.id, request.application_data, request.documents)

        return {
            "status": "success",
            "data": application.model_dump(mode='json')
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error submitting application: {str(e)}")
