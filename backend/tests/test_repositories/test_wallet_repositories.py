"""
Unit tests for withdrawal, store, settings and notification repositories

Author: Mapu Team
Date: 2025-11-25
"""
from types import SimpleNamespace

from marketplace.repositories.withdrawal_repository import WithdrawalRepository
from marketplace.repositories.store_repository import StoreRepository
from marketplace.repositories.settings_repository import SettingsRepository
from marketplace.repositories.notification_repository import NotificationRepository


class TestWithdrawalRepository:
    def test_find_balance_defaults_to_zero(self, supabase):
        balance = WithdrawalRepository(supabase).find_balance('seller-1')

        assert balance.available_balance == 0
        assert balance.total_earned == 0

    def test_find_balance_treats_null_as_zero(self, supabase):
        supabase.respond('seller_balances', data=[
            {'available_balance': 1500.5, 'pending_balance': None, 'total_earned': 3000}
        ])

        balance = WithdrawalRepository(supabase).find_balance('seller-1')

        assert balance.available_balance == 1500.5
        assert balance.pending_balance == 0

    def test_update_request_guards_status_and_owner(self, supabase):
        # Act
        WithdrawalRepository(supabase).update_request(
            'req-1', {'status': 'cancelled'}, only_status='pending', user_id='seller-1'
        )

        # Assert
        query = supabase.queries_for('withdrawal_requests')[0]
        assert query.called('eq') == [('id', 'req-1'), ('status', 'pending'), ('user_id', 'seller-1')]

    def test_find_requests_filters_status(self, supabase):
        supabase.respond('withdrawal_requests', data=[{'id': 'req-1', 'status': 'pending'}])

        rows = WithdrawalRepository(supabase).find_requests(status='pending', limit=10)

        assert rows == [{'id': 'req-1', 'status': 'pending'}]
        assert supabase.queries_for('withdrawal_requests')[0].called('eq') == [('status', 'pending')]


class TestStoreRepository:
    def test_find_open_applications(self, supabase):
        supabase.respond('store_applications', data=[{
            'id': 'app-1',
            'user_id': 'user-1',
            'application_data': {'store_name': 'Tienda Oficial'},
            'status': 'pending',
        }])

        applications = StoreRepository(supabase).find_open_applications()

        assert applications[0].application_data.store_name == 'Tienda Oficial'
        assert supabase.queries_for('store_applications')[0].called('in_') == [
            ('status', ['pending', 'under_review'])
        ]


class TestSettingsRepository:
    def test_find_all_keyed_by_key(self, supabase):
        supabase.respond('settings', data=[
            {'key': 'mp_test_mode', 'value': 'true'},
            {'key': 'minimum_withdrawal_amount', 'value': '5000'},
        ])

        stored = SettingsRepository(supabase).find_all()

        assert set(stored) == {'mp_test_mode', 'minimum_withdrawal_amount'}
        assert stored['mp_test_mode'].value == 'true'

    def test_find_value_missing(self, supabase):
        assert SettingsRepository(supabase).find_value('arca_config') is None


class TestNotificationRepository:
    def test_mark_status_without_stamp(self, supabase):
        NotificationRepository(supabase).mark_status('notif-1', 'failed', stamp=False)

        values = supabase.queries_for('notification_history')[0].called('update')[0][0]
        assert values == {'status': 'failed'}

    def test_mark_status_stamps_updated_at(self, supabase):
        NotificationRepository(supabase).mark_status('notif-1', 'sent')

        values = supabase.queries_for('notification_history')[0].called('update')[0][0]
        assert values['status'] == 'sent'
        assert 'updated_at' in values

    def test_upsert_token_conflict_target(self, supabase):
        NotificationRepository(supabase).upsert_token('user-1', 'ExponentPushToken[x]', 'ios', 'iPhone')

        query = supabase.queries_for('push_tokens')[0]
        row = query.called('upsert')[0][0]
        assert row['is_active'] is True
        assert query.kwargs_of('upsert') == [{'on_conflict': 'user_id,token'}]

    def test_count_unread(self, supabase):
        supabase.respond('notification_history', data=[], count=4)

        assert NotificationRepository(supabase).count_unread('user-1') == 4
        assert supabase.queries_for('notification_history')[0].called('is_') == [('read_at', 'null')]

    def test_find_auth_email(self, supabase):
        supabase.auth.admin.get_user_by_id.return_value = SimpleNamespace(
            user=SimpleNamespace(email='auth@example.com')
        )

        assert NotificationRepository(supabase).find_auth_email('user-1') == 'auth@example.com'

    def test_mark_read_scoped_to_recipient(self, supabase):
        NotificationRepository(supabase).mark_read('notif-1', 'user-1')

        query = supabase.queries_for('notification_history')[0]
        assert 'read_at' in query.called('update')[0][0]
        assert query.called('eq') == [('id', 'notif-1'), ('user_id', 'user-1')]
