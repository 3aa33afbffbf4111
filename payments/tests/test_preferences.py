"""
Tests for typed payment method preferences.
"""

import pytest
from decimal import Decimal
from django.core.exceptions import ValidationError

from payments.preferences import Preference, PreferenceStore


class TestPreferenceConversion:
    """Tests for coercing raw values to declared types"""

    @pytest.mark.parametrize('raw, expected', [
        ('true', True),
        ('1', True),
        ('yes', True),
        ('false', False),
        ('0', False),
        ('off', False),
        ('', False),
        (True, True),
        (0, False),
    ])
    def test_boolean(self, raw, expected):
        assert Preference('test_mode', 'boolean').convert(raw) is expected

    def test_integer(self):
        assert Preference('retries', 'integer').convert('3') == 3

    def test_integer_rejects_garbage(self):
        with pytest.raises(ValidationError):
            Preference('retries', 'integer').convert('three')

    def test_integer_rejects_boolean(self):
        with pytest.raises(ValidationError):
            Preference('retries', 'integer').convert(True)

    def test_decimal(self):
        assert Preference('fee', 'decimal').convert('1.50') == Decimal('1.50')

    def test_array_rejects_string(self):
        with pytest.raises(ValidationError):
            Preference('brands', 'array').convert('visa')

    def test_hash(self):
        assert Preference('extra', 'hash').convert([('a', 1)]) == {'a': 1}

    def test_none_is_unset(self):
        assert Preference('retries', 'integer').convert(None) is None

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            Preference('thing', 'colour')


class TestPreferenceStore:
    """Tests for the preference store"""

    def setup_method(self):
        self.declarations = (
            Preference('server', 'string', 'test'),
            Preference('test_mode', 'boolean', True),
            Preference('fee', 'decimal', None),
        )

    def test_get_falls_back_to_default(self):
        store = PreferenceStore(self.declarations, {})

        assert store.get('server') == 'test'
        assert store.get('test_mode') is True

    def test_set_coerces_and_stores_json_safe_value(self):
        values = {}
        store = PreferenceStore(self.declarations, values)

        store.set('test_mode', 'false')
        store.set('fee', '2.25')

        assert values == {'test_mode': False, 'fee': '2.25'}
        assert store.get('fee') == Decimal('2.25')

    def test_set_unknown_preference(self):
        store = PreferenceStore(self.declarations, {})

        with pytest.raises(ValidationError):
            store.set('login', 'merchant')

    def test_validate_rejects_unknown_keys(self):
        store = PreferenceStore(self.declarations, {'login': 'merchant', 'api_key': 'x'})

        with pytest.raises(ValidationError) as exc_info:
            store.validate()

        assert 'api_key, login' in str(exc_info.value)

    def test_validate_rejects_non_mapping(self):
        with pytest.raises(ValidationError):
            PreferenceStore(self.declarations, ['server']).validate()

    def test_to_dict_contains_every_declaration(self):
        store = PreferenceStore(self.declarations, {'server': 'live'})

        assert store.to_dict() == {'server': 'live', 'test_mode': True, 'fee': None}

    def test_contains(self):
        store = PreferenceStore(self.declarations)

        assert 'server' in store
        assert 'login' not in store
