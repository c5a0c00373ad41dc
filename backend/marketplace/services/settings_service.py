"""
Settings Service - platform settings page and ARCA invoicing configuration

Author: Mapu Team
Date: 2025-11-22
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any

from marketplace.domain.settings import Setting, PlatformSettings, ArcaConfig, Invoice
from marketplace.repositories.settings_repository import SettingsRepository

logger = logging.getLogger(__name__)

ARCA_CONFIG_KEY = 'arca_config'


def _as_bool(value: Any) -> bool:
    return value is True or value == 'true'


class SettingsService:
    def __init__(self, repo: Optional[SettingsRepository] = None):
        self.repo = repo or SettingsRepository()

    def get_all(self) -> Dict[str, Setting]:
        return self.repo.find_all()

    def load_platform_settings(self) -> PlatformSettings:
        """Form values for the settings page; missing keys keep their defaults"""
        stored = self.repo.find_all()
        form = PlatformSettings()

        for key in PlatformSettings.model_fields:
            setting = stored.get(key)
            if setting is None:
                continue
            if key in ('mp_test_mode', 'arca_test_mode'):
                setattr(form, key, _as_bool(setting.value))
            elif key == 'marketplace_owner_id':
                form.marketplace_owner_id = '' if setting.value == 'null' else str(setting.value or '')
            else:
                setattr(form, key, str(setting.value) if setting.value is not None else '')

        return form

    def update_setting(self, key: str, value: Any, admin_id: str) -> bool:
        try:
            self.repo.update_value(key, value, admin_id, datetime.now(timezone.utc).isoformat())
            return True
        except Exception as e:
            logger.error(f"Error updating setting {key}: {e}")
            return False

    def save_platform_settings(self, form: PlatformSettings, admin_id: str) -> bool:
        """
        Write every field of the settings page

        Returns:
            True only when all keys were updated
        """
        updates = {
            'minimum_withdrawal_amount': form.minimum_withdrawal_amount,
            'marketplace_owner_id': form.marketplace_owner_id or 'null',
            'default_commission_rate': form.default_commission_rate,
            'mp_public_key': form.mp_public_key,
            'mp_access_token': form.mp_access_token,
            'mp_test_mode': str(form.mp_test_mode).lower(),
            'arca_cuit': form.arca_cuit,
            'arca_certificate': form.arca_certificate,
            'arca_private_key': form.arca_private_key,
            'arca_test_mode': str(form.arca_test_mode).lower(),
        }
        results = [self.update_setting(key, value, admin_id) for key, value in updates.items()]
        return all(results)

    def get_marketplace_owner_id(self) -> Optional[str]:
        value = self.repo.find_value('marketplace_owner_id')
        return value if value and value != 'null' else None

    # ==================== INVOICING ====================

    def get_arca_config(self) -> ArcaConfig:
        value = self.repo.find_value(ARCA_CONFIG_KEY)
        return ArcaConfig(**value) if isinstance(value, dict) else ArcaConfig()

    def save_arca_config(self, config: ArcaConfig):
        self.repo.upsert_value(ARCA_CONFIG_KEY, config.model_dump(), datetime.now(timezone.utc).isoformat())

    def list_invoices(self, limit: int = 100) -> List[Invoice]:
        return self.repo.find_invoices(limit)
