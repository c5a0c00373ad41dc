"""
Notification Repository - notification_history queue, push_tokens and
recipient lookup

Author: Mapu Team
Date: 2025-11-21
"""
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any

from supabase import Client

from marketplace.core.database import get_supabase
from marketplace.domain.notification import Notification


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NotificationRepository:
    """Repository for notification_history and push_tokens"""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # ==================== QUEUE ====================

    def find_pending(self, limit: int = 100) -> List[Notification]:
        response = (
            self.client.table('notification_history')
            .select('*')
            .eq('status', 'pending')
            .limit(limit)
            .execute()
        )
        return [Notification(**row) for row in (response.data or [])]

    def mark_status(self, notification_id: str, status: str, stamp: bool = True):
        values: Dict[str, Any] = {'status': status}
        if stamp:
            values['updated_at'] = utc_now_iso()
        self.client.table('notification_history').update(values).eq('id', notification_id).execute()

    def insert(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None,
               status: str = 'pending') -> Notification:
        response = self.client.table('notification_history').insert({
            'user_id': user_id,
            'title': title,
            'body': body,
            'data': data,
            'status': status,
        }).execute()
        return Notification(**response.data[0])

    # ==================== INBOX ====================

    def find_by_user(self, user_id: str, limit: int = 50) -> List[Notification]:
        response = (
            self.client.table('notification_history')
            .select('*')
            .eq('user_id', user_id)
            .order('created_at', desc=True)
            .limit(limit)
            .execute()
        )
        return [Notification(**row) for row in (response.data or [])]

    def mark_read(self, notification_id: str, user_id: str):
        """Only the recipient's own row is touched"""
        (
            self.client.table('notification_history')
            .update({'read_at': utc_now_iso()})
            .eq('id', notification_id)
            .eq('user_id', user_id)
            .execute()
        )

    def count_unread(self, user_id: str) -> int:
        response = (
            self.client.table('notification_history')
            .select('id', count='exact')
            .eq('user_id', user_id)
            .is_('read_at', 'null')
            .execute()
        )
        return response.count or 0

    # ==================== PUSH TOKENS ====================

    def find_active_tokens(self, user_id: str) -> List[str]:
        response = (
            self.client.table('push_tokens')
            .select('token')
            .eq('user_id', user_id)
            .eq('is_active', True)
            .execute()
        )
        return [row['token'] for row in (response.data or [])]

    def upsert_token(self, user_id: str, token: str, platform: Optional[str] = None,
                     device_name: Optional[str] = None):
        self.client.table('push_tokens').upsert({
            'user_id': user_id,
            'token': token,
            'platform': platform,
            'device_name': device_name,
            'is_active': True,
            'updated_at': utc_now_iso(),
        }, on_conflict='user_id,token').execute()

    def delete_token(self, user_id: str, token: str):
        self.client.table('push_tokens').delete().eq('user_id', user_id).eq('token', token).execute()

    def deactivate_tokens(self, user_id: str):
        self.client.table('push_tokens').update({'is_active': False}).eq('user_id', user_id).execute()

    # ==================== RECIPIENTS ====================

    def find_profile_email(self, user_id: str) -> Optional[str]:
        response = (
            self.client.table('profiles')
            .select('email, full_name')
            .eq('id', user_id)
            .limit(1)
            .execute()
        )
        return response.data[0].get('email') if response.data else None

    def find_auth_email(self, user_id: str) -> Optional[str]:
        """Email from auth.users (admin API) for profiles without one"""
        response = self.client.auth.admin.get_user_by_id(user_id)
        user = getattr(response, 'user', None)
        return getattr(user, 'email', None) if user else None
