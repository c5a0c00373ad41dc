"""
Withdrawal Service - seller wallet and CRM payout handling

Author: Mapu Team
Date: 2025-11-22
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from marketplace.domain.store import (
    WithdrawalRequest, WithdrawalStats, SellerBalance, BankingDetails,
)
from marketplace.repositories.withdrawal_repository import WithdrawalRepository
from marketplace.repositories.settings_repository import SettingsRepository
from marketplace.services.pricing_service import format_ars

logger = logging.getLogger(__name__)

DEFAULT_MINIMUM_WITHDRAWAL = 5000.0
COUNTED_STATUSES = ('pending', 'approved', 'processing', 'completed', 'rejected', 'cancelled')
OUTSTANDING_STATUSES = ('pending', 'approved', 'processing')

REJECTION_REASON_REQUIRED = 'Debes ingresar un motivo de rechazo'
INVALID_AMOUNT_MESSAGE = 'Ingresa un monto válido'
INSUFFICIENT_BALANCE_MESSAGE = 'No tienes saldo suficiente para este retiro'


def summarize_requests(rows: List[Dict[str, Any]]) -> WithdrawalStats:
    """Count requests per status and total the outstanding / paid amounts"""
    stats = WithdrawalStats()
    for row in rows:
        status = row.get('status')
        amount = float(row.get('amount') or 0)
        if status in COUNTED_STATUSES:
            setattr(stats, status, getattr(stats, status) + 1)
        if status in OUTSTANDING_STATUSES:
            stats.total_pending += amount
        if status == 'completed':
            stats.total_completed += amount
    return stats


class WithdrawalService:
    def __init__(self, repo: Optional[WithdrawalRepository] = None,
                 settings_repo: Optional[SettingsRepository] = None):
        self.repo = repo or WithdrawalRepository()
        self.settings_repo = settings_repo or SettingsRepository(self.repo.client)

    # ==================== SELLER ====================

    def get_balance(self, seller_id: str) -> SellerBalance:
        return self.repo.find_balance(seller_id)

    def get_transactions(self, seller_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        return self.repo.find_transactions(seller_id, limit)

    def get_banking_details(self, user_id: str) -> Optional[BankingDetails]:
        return self.repo.find_banking_details(user_id)

    def update_banking_details(self, user_id: str, details: BankingDetails):
        self.repo.update_banking_details(user_id, details)

    def get_minimum_withdrawal_amount(self) -> float:
        try:
            value = self.settings_repo.find_value('minimum_withdrawal_amount')
            return float(value) if value else DEFAULT_MINIMUM_WITHDRAWAL
        except (TypeError, ValueError):
            return DEFAULT_MINIMUM_WITHDRAWAL
        except Exception as e:
            logger.error(f"Error fetching minimum withdrawal amount: {e}")
            return DEFAULT_MINIMUM_WITHDRAWAL

    def validate_amount(self, seller_id: str, amount: float):
        """Amount must reach the configured minimum and fit the available balance"""
        if not amount or amount <= 0:
            raise ValueError(INVALID_AMOUNT_MESSAGE)

        minimum = self.get_minimum_withdrawal_amount()
        if amount < minimum:
            raise ValueError(f"El monto mínimo para retirar es ${format_ars(minimum).removesuffix(',00')}")

        if amount > self.repo.find_balance(seller_id).available_balance:
            raise ValueError(INSUFFICIENT_BALANCE_MESSAGE)

    def create_request(self, seller_id: str, amount: float, payment_method: str) -> WithdrawalRequest:
        """
        Request a payout to the seller's CBU/CVU or Mercado Pago alias

        Raises:
            ValueError: amount outside minimum/available balance, or banking
                details missing for the chosen method
        """
        self.validate_amount(seller_id, amount)

        details = self.repo.find_banking_details(seller_id)
        if not details:
            raise ValueError('Banking details not found')

        payment_details: Dict[str, Any] = {'account_holder_name': details.account_holder_name}
        if payment_method == 'cbu_cvu':
            if not details.cbu_cvu:
                raise ValueError('CBU/CVU not configured')
            payment_details['cbu_cvu'] = details.cbu_cvu
        elif payment_method == 'mp_alias':
            if not details.mp_alias:
                raise ValueError('Mercado Pago alias not configured')
            payment_details['mp_alias'] = details.mp_alias
        else:
            raise ValueError(f"Unknown payment method: {payment_method}")

        return self.repo.insert_request({
            'user_id': seller_id,
            'amount': amount,
            'payment_method': payment_method,
            'bank_account_info': payment_details,
            'status': 'pending',
        })

    def list_seller_requests(self, seller_id: str) -> List[WithdrawalRequest]:
        return self.repo.find_requests_by_user(seller_id)

    def cancel_request(self, request_id: str, seller_id: Optional[str] = None):
        """Only requests still pending are cancelled"""
        self.repo.update_request(request_id, {'status': 'cancelled'}, only_status='pending', user_id=seller_id)

    # ==================== CRM ====================

    def list_requests(self, status: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        return self.repo.find_requests(status, limit)

    def get_stats(self) -> WithdrawalStats:
        return summarize_requests(self.repo.find_status_amounts())

    def update_status(self, request_id: str, status: str, admin_id: str,
                      notes: Optional[str] = None,
                      rejection_reason: Optional[str] = None,
                      transaction_reference: Optional[str] = None):
        if status == 'rejected' and not (rejection_reason or '').strip():
            raise ValueError(REJECTION_REASON_REQUIRED)

        now = datetime.now(timezone.utc).isoformat()
        values: Dict[str, Any] = {
            'status': status,
            'processed_by': admin_id,
            'admin_notes': notes or None,
            'updated_at': now,
        }
        if status == 'rejected':
            values['rejection_reason'] = rejection_reason
        if status == 'completed':
            values['processed_at'] = now
            if transaction_reference:
                values['transaction_reference'] = transaction_reference

        self.repo.update_request(request_id, values)
        logger.info(f"Withdrawal {request_id} -> {status} by {admin_id}")
