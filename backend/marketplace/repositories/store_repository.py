"""
Store Repository - official stores and store applications

Author: Mapu Team
Date: 2025-11-20
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.store import OfficialStore, StoreApplication


class StoreRepository:
    """Repository for official_stores, store_applications, store_policies, store_metrics"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # ==================== OFFICIAL STORES ====================

    def find_stores(self) -> List[OfficialStore]:
        response = (
            self.client.table('official_stores')
            .select('*')
            .order('created_at', desc=True)
            .execute()
        )
        return [OfficialStore(**row) for row in (response.data or [])]

    def update_store(self, store_id: str, values: Dict[str, Any]):
        self.client.table('official_stores').update(values).eq('id', store_id).execute()

    def insert_store(self, store_data: Dict[str, Any]) -> OfficialStore:
        response = self.client.table('official_stores').insert(store_data).execute()
        return OfficialStore(**response.data[0])

    def insert_policies(self, policies: Dict[str, Any]):
        self.client.table('store_policies').insert(policies).execute()

    def insert_metrics(self, metrics: Dict[str, Any]):
        self.client.table('store_metrics').insert(metrics).execute()

    # ==================== APPLICATIONS ====================

    def find_open_applications(self) -> List[StoreApplication]:
        """Applications still pending or under review, newest first"""
        response = (
            self.client.table('store_applications')
            .select('*, profiles:user_id (email, full_name)')
            .in_('status', ['pending', 'under_review'])
            .order('created_at', desc=True)
            .execute()
        )
        return [StoreApplication(**row) for row in (response.data or [])]

    def find_application(self, application_id: str) -> Optional[StoreApplication]:
        response = (
            self.client.table('store_applications')
            .select('*')
            .eq('id', application_id)
            .limit(1)
            .execute()
        )
        return StoreApplication(**response.data[0]) if response.data else None

    def insert_application(self, user_id: str, application_data: Dict[str, Any],
                           documents: Optional[Dict[str, str]] = None) -> StoreApplication:
        response = self.client.table('store_applications').insert({
            'user_id': user_id,
            'application_data': application_data,
            'documents': documents or None,
            'status': 'pending',
        }).execute()
        return StoreApplication(**response.data[0])

    def update_application(self, application_id: str, values: Dict[str, Any]):
        self.client.table('store_applications').update(values).eq('id', application_id).execute()
