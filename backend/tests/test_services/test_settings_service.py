"""
Unit tests for SettingsService

Author: Mapu Team
Date: 2025-11-25
"""
from unittest.mock import MagicMock

from marketplace.domain.settings import Setting, PlatformSettings, ArcaConfig, Invoice
from marketplace.services.settings_service import SettingsService


class TestSettingsService:
    def test_load_platform_settings(self):
        # Arrange
        repo = MagicMock()
        repo.find_all.return_value = {
            'minimum_withdrawal_amount': Setting(key='minimum_withdrawal_amount', value=7500),
            'marketplace_owner_id': Setting(key='marketplace_owner_id', value='null'),
            'mp_test_mode': Setting(key='mp_test_mode', value='false'),
            'arca_test_mode': Setting(key='arca_test_mode', value=True),
        }

        # Act
        form = SettingsService(repo).load_platform_settings()

        # Assert
        assert form.minimum_withdrawal_amount == '7500'
        assert form.marketplace_owner_id == ''
        assert form.mp_test_mode is False
        assert form.arca_test_mode is True
        assert form.default_commission_rate == '10.00'

    def test_save_writes_every_key(self):
        repo = MagicMock()
        form = PlatformSettings(mp_test_mode=False)

        all_succeeded = SettingsService(repo).save_platform_settings(form, 'admin-1')

        written = {call.args[0]: call.args[1] for call in repo.update_value.call_args_list}
        assert all_succeeded is True
        assert len(written) == 10
        assert written['marketplace_owner_id'] == 'null'
        assert written['mp_test_mode'] == 'false'
        assert written['arca_test_mode'] == 'true'

    def test_save_reports_partial_failure(self):
        repo = MagicMock()
        repo.update_value.side_effect = [None, Exception('rls')] + [None] * 8

        assert SettingsService(repo).save_platform_settings(PlatformSettings(), 'admin-1') is False
        assert repo.update_value.call_count == 10

    def test_owner_id_null_string(self):
        repo = MagicMock()
        repo.find_value.return_value = 'null'

        assert SettingsService(repo).get_marketplace_owner_id() is None

    def test_arca_config_defaults(self):
        repo = MagicMock()
        repo.find_value.return_value = None

        config = SettingsService(repo).get_arca_config()

        assert config == ArcaConfig()
        assert config.isHomologation is True

    def test_save_arca_config_upserts(self):
        repo = MagicMock()

        SettingsService(repo).save_arca_config(ArcaConfig(cuit='20123456789', pointOfSale=3))

        key, value, _ = repo.upsert_value.call_args[0]
        assert key == 'arca_config'
        assert value['cuit'] == '20123456789'
        assert value['pointOfSale'] == 3


class TestInvoice:
    def test_formatted_number_and_type(self):
        invoice = Invoice(id='inv-1', invoice_number=42, point_of_sale=1, invoice_type=6)

        assert invoice.formatted_number == '0001-00000042'
        assert invoice.type_name == 'Factura B'

    def test_unknown_type(self):
        assert Invoice(id='i', invoice_number=1, point_of_sale=1, invoice_type=99).type_name == 'Tipo 99'
