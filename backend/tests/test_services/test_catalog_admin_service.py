"""
Unit tests for CategoryService, CouponService and ShippingService

Author: Mapu Team
Date: 2025-11-25
"""
from unittest.mock import MagicMock

import pytest

from marketplace.domain.catalog import (
    Category, CategoryInput, CouponInput, ShippingRateInput, ShippingMethod,
)
from marketplace.services.catalog_admin_service import (
    CategoryService, CouponService, ShippingService, slugify,
    COUPON_VALIDATION_ERROR, SHIPPING_CALCULATION_ERROR,
)


class TestSlugify:
    def test_strips_accents_and_symbols(self):
        assert slugify('Electrónica y Más') == 'electronica-y-mas'
        assert slugify('  Niños & Bebés!! ') == 'ninos-bebes'


class TestCategoryService:
    def test_commission_out_of_range(self):
        repo = MagicMock()

        with pytest.raises(ValueError, match='entre 0 y 100'):
            CategoryService(repo).save_category(CategoryInput(name='Hogar', commission_rate=150))

        repo.insert.assert_not_called()

    def test_name_required(self):
        with pytest.raises(ValueError, match='El nombre es obligatorio'):
            CategoryService(MagicMock()).save_category(CategoryInput(name='  '))

    def test_new_category_goes_last(self):
        # Arrange
        repo = MagicMock()
        repo.find_all.return_value = [Category(id='c1', name='A'), Category(id='c2', name='B')]

        # Act
        CategoryService(repo).save_category(CategoryInput(name='Electrónica', commission_rate=12, description=''))

        # Assert
        data = repo.insert.call_args[0][0]
        assert data['slug'] == 'electronica'
        assert data['display_order'] == 2
        assert data['description'] is None
        repo.find_all.assert_called_once_with(with_counts=False)

    def test_update_stamps_updated_at(self):
        repo = MagicMock()

        CategoryService(repo).save_category(CategoryInput(name='Hogar'), category_id='c1')

        category_id, data = repo.update.call_args[0]
        assert category_id == 'c1'
        assert 'updated_at' in data
        assert 'display_order' not in data

    def test_delete_refused_with_products(self):
        repo = MagicMock()
        repo.find_by_id.return_value = Category(id='c1', name='Hogar', product_count=3)

        with pytest.raises(ValueError, match='tiene 3 productos asociados'):
            CategoryService(repo).delete_category('c1')

        repo.delete.assert_not_called()

    def test_delete_missing(self):
        repo = MagicMock()
        repo.find_by_id.return_value = None

        with pytest.raises(LookupError):
            CategoryService(repo).delete_category('c1')

    def test_set_active(self):
        repo = MagicMock()

        CategoryService(repo).set_active('c1', False)

        repo.update.assert_called_once_with('c1', {'is_active': False})


class TestCouponService:
    def test_code_is_upper_cased_and_defaults_applied(self):
        # Arrange
        repo = MagicMock()
        form = CouponInput(code='verano10', name='Verano', max_discount=0, usage_limit=None, usage_per_user=0)

        # Act
        CouponService(repo).save_coupon(form)

        # Assert
        data = repo.insert.call_args[0][0]
        assert data['code'] == 'VERANO10'
        assert data['max_discount'] is None
        assert data['usage_limit'] is None
        assert data['usage_per_user'] == 1
        assert data['expires_at'] is None
        assert data['starts_at']

    def test_existing_coupon_is_updated(self):
        repo = MagicMock()

        CouponService(repo).save_coupon(CouponInput(id='coupon-1', code='X', name='Y'))

        assert repo.update.call_args[0][0] == 'coupon-1'
        repo.insert.assert_not_called()

    def test_code_and_name_required(self):
        with pytest.raises(ValueError):
            CouponService(MagicMock()).save_coupon(CouponInput(code='', name='Verano'))

    def test_validate_coupon_rpc_failure(self):
        repo = MagicMock()
        repo.validate.side_effect = Exception('rpc down')

        validation = CouponService(repo).validate_coupon('X', 'user-1', 100)

        assert validation.is_valid is False
        assert validation.error_message == COUPON_VALIDATION_ERROR

    def test_validate_coupon_result(self):
        repo = MagicMock()
        repo.validate.return_value = {'is_valid': True, 'coupon_id': 'coupon-1', 'discount_amount': 150}

        validation = CouponService(repo).validate_coupon('VERANO10', 'user-1', 1500)

        assert validation.is_valid is True
        assert validation.discount_amount == 150

    def test_apply_coupon_failure_is_false(self):
        repo = MagicMock()
        repo.apply.side_effect = Exception('rpc down')

        assert CouponService(repo).apply_coupon('coupon-1', 'user-1', 'order-1', 10) is False


class TestShippingService:
    def test_rate_requires_zone_and_method(self):
        with pytest.raises(ValueError):
            ShippingService(MagicMock()).save_rate(ShippingRateInput(zone_id='z1'))

    def test_rate_nulls(self):
        repo = MagicMock()

        ShippingService(repo).save_rate(ShippingRateInput(zone_id='z1', method_id='m1', free_shipping_min=0))

        data = repo.insert_rate.call_args[0][0]
        assert data['free_shipping_min'] is None
        assert data['base_price'] == 0

    def test_calculate_shipping_failure(self):
        repo = MagicMock()
        repo.calculate.return_value = None

        calculation = ShippingService(repo).calculate_shipping('Salta', 'm1', 1000)

        assert calculation.error_message == SHIPPING_CALCULATION_ERROR

    def test_shipping_options_drop_unavailable_methods(self):
        # Arrange
        repo = MagicMock()
        repo.find_methods.return_value = [
            ShippingMethod(id='m1', name='Estándar'),
            ShippingMethod(id='m2', name='Express'),
        ]
        repo.calculate.side_effect = [
            {'shipping_cost': 1200, 'is_free': False, 'estimated_days': '3-5 días', 'error_message': None},
            {'shipping_cost': 0, 'is_free': False, 'estimated_days': '', 'error_message': 'No disponible'},
        ]

        # Act
        options = ShippingService(repo).get_shipping_options('Córdoba', 5000)

        # Assert
        assert [option.method.id for option in options] == ['m1']
        assert options[0].cost == 1200
        repo.find_methods.assert_called_once_with(active_only=True)
