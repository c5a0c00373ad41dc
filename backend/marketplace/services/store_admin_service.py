"""
Store Admin Service - official stores and store applications

Approving an application creates the official store together with its
default policies and an empty all-time metrics row. The inserts are not
transactional; a failure part-way leaves the earlier rows in place and the
application still open.

Author: Mapu Team
Date: 2025-11-22
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict

from marketplace.domain.store import OfficialStore, StoreApplication, ApplicationData
from marketplace.repositories.store_repository import StoreRepository
from marketplace.services.catalog_admin_service import slugify

logger = logging.getLogger(__name__)

APPROVED_NOTE = 'Aplicación aprobada desde el CRM'
REJECTED_NOTE = 'Aplicación rechazada'
ALREADY_REVIEWED_MESSAGE = 'La aplicación ya fue revisada'
OPEN_APPLICATION_STATUSES = ('pending', 'under_review')


def default_store_policies(store_id: str, application: ApplicationData) -> dict:
    return {
        'store_id': store_id,
        'warranty_days': 30,
        'return_policy': 'Consultar con el vendedor',
        'accepts_returns': True,
        'return_window_days': 30,
        'shipping_policy': 'Envío a coordinar con el vendedor',
        'payment_methods': ['cash', 'transfer'],
        'accepts_installments': False,
        'support_email': application.email,
        'support_phone': application.phone,
        'support_hours': 'Lun-Vie 9-18hs',
    }


def initial_store_metrics(store_id: str) -> dict:
    metrics = dict.fromkeys([
        'total_revenue', 'monthly_revenue', 'avg_order_value', 'avg_rating',
        'total_reviews', 'customer_satisfaction_rate', 'response_time_hours',
        'products_count', 'active_products_count', 'out_of_stock_count',
        'total_customers', 'repeat_customers', 'repeat_customer_rate',
        'return_rate', 'refund_rate',
    ], 0)
    metrics.update({'store_id': store_id, 'metric_type': 'all_time', 'response_rate': 100})
    return metrics


class StoreAdminService:
    def __init__(self, repo: Optional[StoreRepository] = None):
        self.repo = repo or StoreRepository()

    # ==================== OFFICIAL STORES ====================

    def list_stores(self) -> List[OfficialStore]:
        return self.repo.find_stores()

    def set_store_active(self, store_id: str, is_active: bool):
        self.repo.update_store(store_id, {'is_active': is_active})

    def suspend_store(self, store_id: str):
        self.repo.update_store(store_id, {'verification_status': 'suspended', 'is_active': False})

    # ==================== APPLICATIONS ====================

    def list_applications(self) -> List[StoreApplication]:
        return self.repo.find_open_applications()

    def submit_application(self, user_id: str, application: ApplicationData,
                           documents: Optional[Dict[str, str]] = None) -> StoreApplication:
        if not application.store_name.strip():
            raise ValueError('El nombre de la tienda es obligatorio')
        return self.repo.insert_application(user_id, application.model_dump(), documents)

    def _get_application(self, application_id: str) -> StoreApplication:
        application = self.repo.find_application(application_id)
        if not application:
            raise LookupError(f"Application {application_id} not found")
        return application

    def approve_application(self, application_id: str) -> OfficialStore:
        """Create the official store for an application and mark it approved"""
        application = self._get_application(application_id)
        if application.status not in OPEN_APPLICATION_STATUSES:
            raise ValueError(ALREADY_REVIEWED_MESSAGE)
        data = application.application_data
        now = datetime.now(timezone.utc).isoformat()

        store = self.repo.insert_store({
            'user_id': application.user_id,
            'store_name': data.store_name,
            'slug': slugify(data.store_name),
            'description': data.description,
            'email': data.email,
            'phone': data.phone,
            'website': data.website or None,
            'address': data.address,
            'city': data.city,
            'state': data.state,
            'postal_code': data.postal_code,
            'country': 'Argentina',
            'business_type': data.business_type,
            'tax_id': data.tax_id,
            'legal_name': data.legal_name,
            'verification_status': 'approved',
            'verified_at': now,
            'is_active': True,
            'rating': 0,
            'total_sales': 0,
            'total_products': 0,
            'followers_count': 0,
        })

        self.repo.insert_policies(default_store_policies(store.id, data))
        self.repo.insert_metrics(initial_store_metrics(store.id))
        self.repo.update_application(application_id, {
            'status': 'approved',
            'reviewed_at': now,
            'review_notes': APPROVED_NOTE,
        })

        logger.info(f"Application {application_id} approved: store {store.id} ({store.slug})")
        return store

    def reject_application(self, application_id: str, reason: Optional[str] = None):
        self.repo.update_application(application_id, {
            'status': 'rejected',
            'reviewed_at': datetime.now(timezone.utc).isoformat(),
            'review_notes': reason or REJECTED_NOTE,
        })
