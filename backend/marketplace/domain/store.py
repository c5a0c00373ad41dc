"""
Store & Wallet Domain Models

Official stores, store applications, seller balances and withdrawal requests.

Author: Mapu Team
Date: 2025-11-19
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal, Dict, Any
from datetime import datetime


VerificationStatus = Literal['pending', 'approved', 'rejected', 'suspended']
ApplicationStatus = Literal['pending', 'under_review', 'approved', 'rejected']
WithdrawalStatus = Literal['pending', 'approved', 'processing', 'completed', 'rejected', 'cancelled']
WithdrawalMethod = Literal['cbu_cvu', 'mp_alias']


class OfficialStore(BaseModel):
    id: str
    user_id: str
    store_name: str
    slug: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    business_type: Optional[str] = None
    tax_id: Optional[str] = None
    legal_name: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    verification_status: VerificationStatus = 'pending'
    verified_at: Optional[datetime] = None
    is_active: bool = True
    rating: float = 0
    total_sales: int = 0
    total_products: int = 0
    followers_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, extra='ignore')


class ApplicationData(BaseModel):
    """Form submitted by a seller who wants an official store"""

    store_name: str
    description: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    business_type: Optional[str] = None
    tax_id: Optional[str] = None
    legal_name: Optional[str] = None


class StoreApplication(BaseModel):
    id: str
    user_id: str
    application_data: ApplicationData
    status: ApplicationStatus = 'pending'
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    profiles: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra='ignore')


class SellerBalance(BaseModel):
    available_balance: float = 0
    pending_balance: float = 0
    total_withdrawn: float = 0
    total_earned: float = 0


class BankingDetails(BaseModel):
    cbu_cvu: Optional[str] = None
    mp_alias: Optional[str] = None
    cuil_cuit: Optional[str] = None
    account_holder_name: Optional[str] = None


class WithdrawalRequest(BaseModel):
    id: str
    seller_id: Optional[str] = None
    user_id: Optional[str] = None
    amount: float
    payment_method: WithdrawalMethod
    bank_account_info: Optional[Dict[str, Any]] = None
    status: WithdrawalStatus = 'pending'
    requested_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    processed_by: Optional[str] = None
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    transaction_reference: Optional[str] = None

    model_config = ConfigDict(extra='ignore')


class WithdrawalStats(BaseModel):
    """Counters shown on top of the CRM withdrawals page"""

    pending: int = 0
    approved: int = 0
    processing: int = 0
    completed: int = 0
    rejected: int = 0
    cancelled: int = 0
    total_pending: float = Field(0, description="Amount still owed (pending + approved + processing)")
    total_completed: float = 0


class CommissionCalculation(BaseModel):
    subtotal: float
    commission_rate: float
    commission_amount: float
    seller_payout: float
