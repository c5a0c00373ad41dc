"""
Withdrawal Repository - seller balances, banking details and payout requests

Author: Mapu Team
Date: 2025-11-20
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.store import WithdrawalRequest, SellerBalance, BankingDetails


class WithdrawalRepository:
    """Repository for withdrawal_requests, seller_balances, balance_transactions"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # ==================== BALANCE ====================

    def find_balance(self, seller_id: str) -> SellerBalance:
        """
        Seller balance; zeros when the seller has no balance row yet
        """
        response = (
            self.client.table('seller_balances')
            .select('available_balance, pending_balance, total_earned')
            .eq('seller_id', seller_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return SellerBalance()

        row = response.data[0]
        return SellerBalance(
            available_balance=row.get('available_balance') or 0,
            pending_balance=row.get('pending_balance') or 0,
            total_earned=row.get('total_earned') or 0,
        )

    def find_transactions(self, seller_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        response = (
            self.client.table('balance_transactions')
            .select('*')
            .eq('seller_id', seller_id)
            .order('created_at', desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    # ==================== BANKING DETAILS ====================

    def find_banking_details(self, user_id: str) -> Optional[BankingDetails]:
        response = (
            self.client.table('profiles')
            .select('cbu_cvu, mp_alias, cuil_cuit, account_holder_name')
            .eq('id', user_id)
            .limit(1)
            .execute()
        )
        return BankingDetails(**response.data[0]) if response.data else None

    def update_banking_details(self, user_id: str, details: BankingDetails):
        self.client.table('profiles').update(details.model_dump(exclude_none=True)).eq('id', user_id).execute()

    # ==================== REQUESTS ====================

    def insert_request(self, request_data: Dict[str, Any]) -> WithdrawalRequest:
        response = self.client.table('withdrawal_requests').insert(request_data).execute()
        return WithdrawalRequest(**response.data[0])

    def find_requests_by_user(self, user_id: str) -> List[WithdrawalRequest]:
        response = (
            self.client.table('withdrawal_requests')
            .select('*')
            .eq('user_id', user_id)
            .order('requested_at', desc=True)
            .execute()
        )
        return [WithdrawalRequest(**row) for row in (response.data or [])]

    def find_requests(self, status: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        """
        Requests with the seller profile joined (CRM list)

        Returns raw rows: the joined profile is shown as-is.
        """
        query = (
            self.client.table('withdrawal_requests')
            .select('*, profiles:seller_id (full_name, email, phone, cuil_cuit)')
            .order('requested_at', desc=True)
            .limit(limit)
        )
        if status:
            query = query.eq('status', status)
        return query.execute().data or []

    def find_status_amounts(self) -> List[Dict[str, Any]]:
        response = self.client.table('withdrawal_requests').select('status, amount').execute()
        return response.data or []

    def update_request(self, request_id: str, values: Dict[str, Any], only_status: Optional[str] = None,
                       user_id: Optional[str] = None):
        """Update a request, optionally only while it is still in `only_status` (and owned by `user_id`)"""
        query = self.client.table('withdrawal_requests').update(values).eq('id', request_id)
        if only_status:
            query = query.eq('status', only_status)
        if user_id:
            query = query.eq('user_id', user_id)
        query.execute()

    # ==================== COMMISSION ====================

    def calculate_payout(self, product_id: str, seller_id: str, category_id: str,
                         unit_price: float, quantity: int) -> Optional[Dict[str, Any]]:
        """Call calculate_seller_payout RPC; None when it returned nothing"""
        response = self.client.rpc('calculate_seller_payout', {
            'p_product_id': product_id,
            'p_seller_id': seller_id,
            'p_category_id': category_id,
            'p_unit_price': unit_price,
            'p_quantity': quantity,
        }).execute()
        rows = response.data or []
        return rows[0] if rows else None
