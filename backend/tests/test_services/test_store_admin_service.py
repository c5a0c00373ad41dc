"""
Unit tests for StoreAdminService

Author: Mapu Team
Date: 2025-11-25
"""
from unittest.mock import MagicMock

import pytest

from marketplace.domain.store import OfficialStore, StoreApplication, ApplicationData
from marketplace.services.store_admin_service import (
    StoreAdminService, initial_store_metrics, APPROVED_NOTE, REJECTED_NOTE,
    ALREADY_REVIEWED_MESSAGE,
)


@pytest.fixture
def application():
    return StoreApplication(
        id='app-1',
        user_id='user-1',
        application_data=ApplicationData(
            store_name='Almacén Oficial Córdoba',
            email='tienda@example.com',
            phone='351555000',
            website='',
        ),
    )


class TestStoreAdminService:
    def test_approve_creates_store_policies_and_metrics(self, application):
        # Arrange
        repo = MagicMock()
        repo.find_application.return_value = application
        repo.insert_store.side_effect = lambda data: OfficialStore(id='store-1', **data)

        # Act
        store = StoreAdminService(repo).approve_application('app-1')

        # Assert
        store_data = repo.insert_store.call_args[0][0]
        assert store_data['slug'] == 'almacen-oficial-cordoba'
        assert store_data['country'] == 'Argentina'
        assert store_data['website'] is None
        assert store_data['verification_status'] == 'approved'
        assert store.id == 'store-1'

        policies = repo.insert_policies.call_args[0][0]
        assert policies['store_id'] == 'store-1'
        assert policies['support_email'] == 'tienda@example.com'

        metrics = repo.insert_metrics.call_args[0][0]
        assert metrics['metric_type'] == 'all_time'
        assert metrics['response_rate'] == 100

        application_id, values = repo.update_application.call_args[0]
        assert application_id == 'app-1'
        assert values['status'] == 'approved'
        assert values['review_notes'] == APPROVED_NOTE

    def test_approve_missing_application(self):
        repo = MagicMock()
        repo.find_application.return_value = None

        with pytest.raises(LookupError):
            StoreAdminService(repo).approve_application('app-9')

        repo.insert_store.assert_not_called()

    @pytest.mark.parametrize('status', ['approved', 'rejected'])
    def test_approve_refuses_reviewed_application(self, application, status):
        # Arrange
        repo = MagicMock()
        repo.find_application.return_value = application.model_copy(update={'status': status})

        # Act / Assert
        with pytest.raises(ValueError, match=ALREADY_REVIEWED_MESSAGE):
            StoreAdminService(repo).approve_application('app-1')

        repo.insert_store.assert_not_called()
        repo.update_application.assert_not_called()

    def test_approve_under_review_application(self, application):
        repo = MagicMock()
        repo.find_application.return_value = application.model_copy(update={'status': 'under_review'})
        repo.insert_store.side_effect = lambda data: OfficialStore(id='store-1', **data)

        StoreAdminService(repo).approve_application('app-1')

        repo.insert_store.assert_called_once()

    def test_approve_stops_when_store_insert_fails(self, application):
        repo = MagicMock()
        repo.find_application.return_value = application
        repo.insert_store.side_effect = Exception('duplicate slug')

        with pytest.raises(Exception, match='duplicate slug'):
            StoreAdminService(repo).approve_application('app-1')

        repo.update_application.assert_not_called()

    def test_reject_default_note(self):
        repo = MagicMock()

        StoreAdminService(repo).reject_application('app-1')

        values = repo.update_application.call_args[0][1]
        assert values['status'] == 'rejected'
        assert values['review_notes'] == REJECTED_NOTE

    def test_reject_with_reason(self):
        repo = MagicMock()

        StoreAdminService(repo).reject_application('app-1', 'Falta CUIT')

        assert repo.update_application.call_args[0][1]['review_notes'] == 'Falta CUIT'

    def test_suspend_store(self):
        repo = MagicMock()

        StoreAdminService(repo).suspend_store('store-1')

        repo.update_store.assert_called_once_with('store-1', {'verification_status': 'suspended', 'is_active': False})

    def test_submit_requires_store_name(self):
        with pytest.raises(ValueError):
            StoreAdminService(MagicMock()).submit_application('user-1', ApplicationData(store_name=' '))


class TestInitialMetrics:
    def test_counters_start_at_zero(self):
        metrics = initial_store_metrics('store-1')

        assert metrics['total_revenue'] == 0
        assert metrics['refund_rate'] == 0
        assert metrics['store_id'] == 'store-1'
