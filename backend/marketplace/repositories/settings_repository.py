"""
Settings Repository - key/value platform settings and invoices

Author: Mapu Team
Date: 2025-11-20
"""
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.settings import Setting, Invoice


class SettingsRepository:
    """Repository for the settings and invoices tables"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    def find_all(self) -> Dict[str, Setting]:
        """All settings keyed by setting key"""
        response = self.client.table('settings').select('*').execute()
        return {row['key']: Setting(**row) for row in (response.data or [])}

    def find_value(self, key: str) -> Optional[Any]:
        response = (
            self.client.table('settings')
            .select('value')
            .eq('key', key)
            .limit(1)
            .execute()
        )
        return response.data[0].get('value') if response.data else None

    def update_value(self, key: str, value: Any, updated_by: str, updated_at: str):
        self.client.table('settings').update({
            'value': value,
            'updated_by': updated_by,
            'updated_at': updated_at,
        }).eq('key', key).execute()

    def upsert_value(self, key: str, value: Any, updated_at: str):
        self.client.table('settings').upsert({
            'key': key,
            'value': value,
            'updated_at': updated_at,
        }).execute()

    def find_invoices(self, limit: int = 100) -> List[Invoice]:
        response = (
            self.client.table('invoices')
            .select('*')
            .order('created_at', desc=True)
            .limit(limit)
            .execute()
        )
        return [Invoice(**row) for row in (response.data or [])]
