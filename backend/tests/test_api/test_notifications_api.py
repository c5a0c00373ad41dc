"""
API tests for the notifications router

Author: Mapu Team
Date: 2025-11-25
"""
from unittest.mock import patch, AsyncMock

import pytest
from fastapi.testclient import TestClient

from marketplace.main import app
from marketplace.core.auth import TokenUser, get_current_user
from marketplace.core.config import settings

USER = TokenUser(id='user-1', email='ana@example.com', role='customer')


@pytest.fixture
def client():
    app.dependency_overrides[get_current_user] = lambda: USER
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestDispatchEndpoint:
    @patch.object(settings, 'NOTIFICATIONS_API_KEY', 'secret-key')
    @patch('marketplace.api.notifications.NotificationDispatcher')
    def test_dispatch_requires_key(self, mock_dispatcher_cls, client):
        response = client.post('/api/v1/notifications/dispatch')

        assert response.status_code == 401
        mock_dispatcher_cls.assert_not_called()

    @patch.object(settings, 'NOTIFICATIONS_API_KEY', 'secret-key')
    @patch('marketplace.api.notifications.NotificationDispatcher')
    def test_dispatch_wrong_key(self, mock_dispatcher_cls, client):
        response = client.post('/api/v1/notifications/dispatch', headers={'X-Notifications-Key': 'nope'})

        assert response.status_code == 401

    @patch.object(settings, 'NOTIFICATIONS_API_KEY', 'secret-key')
    @patch('marketplace.api.notifications.NotificationDispatcher')
    def test_dispatch_with_key(self, mock_dispatcher_cls, client):
        # Arrange
        mock_dispatcher_cls.return_value.process_pending = AsyncMock(return_value={
            'processed': 1, 'results': [{'id': 'notif-1', 'status': 'sent', 'tokens_count': 1}],
        })

        # Act
        response = client.post('/api/v1/notifications/dispatch', headers={'X-Notifications-Key': 'secret-key'})

        # Assert
        assert response.status_code == 200
        assert response.json()['processed'] == 1

    @patch.object(settings, 'NOTIFICATIONS_API_KEY', '')
    @patch('marketplace.api.notifications.NotificationDispatcher')
    def test_dispatch_failure_returns_error_body(self, mock_dispatcher_cls, client):
        mock_dispatcher_cls.return_value.process_pending = AsyncMock(side_effect=Exception('supabase down'))

        response = client.post('/api/v1/notifications/dispatch')

        assert response.status_code == 500
        assert response.json() == {'error': 'supabase down'}


class TestInboxEndpoints:
    @patch('marketplace.api.notifications.NotificationService')
    def test_unread_count(self, mock_service_cls, client):
        mock_service_cls.return_value.get_unread_count.return_value = 3

        response = client.get('/api/v1/notifications/unread-count')

        assert response.json()['data'] == {'unread': 3}
        mock_service_cls.return_value.get_unread_count.assert_called_once_with('user-1')

    def test_mark_as_read_uses_session_user(self, client, supabase):
        with patch('marketplace.repositories.notification_repository.get_supabase', return_value=supabase):
            response = client.post('/api/v1/notifications/notif-9/read')

        # Assert
        assert response.status_code == 200
        query = supabase.queries_for('notification_history')[0]
        assert query.called('eq') == [('id', 'notif-9'), ('user_id', 'user-1')]

    def test_mark_as_read_filters_on_caller_not_owner(self, supabase):
        # Arrange
        supabase.respond('notification_history', data=[])
        app.dependency_overrides[get_current_user] = lambda: TokenUser(id='intruder-1', role='customer')

        # Act
        try:
            with patch('marketplace.repositories.notification_repository.get_supabase', return_value=supabase):
                response = TestClient(app).post('/api/v1/notifications/notif-9/read')
        finally:
            app.dependency_overrides.clear()

        # Assert
        assert response.status_code == 200
        query = supabase.queries_for('notification_history')[0]
        assert ('user_id', 'intruder-1') in query.called('eq')
        assert ('user_id', 'user-1') not in query.called('eq')

    @patch('marketplace.api.notifications.NotificationService')
    def test_register_push_token(self, mock_service_cls, client):
        response = client.post('/api/v1/notifications/push-tokens',
                               json={'token': 'ExponentPushToken[a]', 'platform': 'ios'})

        assert response.status_code == 200
        mock_service_cls.return_value.save_push_token.assert_called_once_with(
            'user-1', 'ExponentPushToken[a]', 'ios', None
        )

    @patch('marketplace.api.notifications.NotificationService')
    def test_delete_all_tokens_on_logout(self, mock_service_cls, client):
        response = client.delete('/api/v1/notifications/push-tokens')

        assert response.status_code == 200
        mock_service_cls.return_value.deactivate_user_tokens.assert_called_once_with('user-1')
        mock_service_cls.return_value.remove_push_token.assert_not_called()

    def test_queue_requires_admin(self, client):
        response = client.post('/api/v1/notifications/queue',
                               json={'user_id': 'user-2', 'title': 'Hola', 'body': 'Mundo'})

        assert response.status_code == 403
