"""
Tests for the bogus and offline gateways.
"""

import pytest
from types import SimpleNamespace

from payments.gateways.bogus import BogusGateway
from payments.gateways.offline import OfflineGateway


@pytest.fixture
def gateway():
    return BogusGateway({'server': 'test'}, mode='test')


@pytest.fixture
def valid_card():
    return SimpleNamespace(number='4111111111111111', gateway_customer_profile_id=None)


@pytest.fixture
def invalid_card():
    return SimpleNamespace(number='4000000000000002', gateway_customer_profile_id=None)


class TestBogusGateway:
    """Tests for deterministic bogus responses"""

    @pytest.mark.parametrize('number', BogusGateway.VALID_CCS)
    def test_authorize_valid_numbers(self, gateway, number):
        response = gateway.authorize(1000, SimpleNamespace(number=number))

        assert response.success is True
        assert response.authorization == '12345'
        assert response.message == 'Bogus Gateway: Forced success'
        assert response.params['avs_result'] == {'code': 'D'}
        assert response.test is True

    def test_authorize_declines_other_numbers(self, gateway, invalid_card):
        response = gateway.authorize(1000, invalid_card)

        assert response.success is False
        assert response.message == 'Bogus Gateway: Forced failure'
        assert response.params['message'] == 'Bogus Gateway: Forced failure'
        assert response.error_code == 'declined'
        assert response.authorization is None

    def test_authorize_with_customer_profile(self, gateway):
        source = SimpleNamespace(number=None, gateway_customer_profile_id='BGS-123')

        assert gateway.authorize(1000, source).success is True

    def test_authorize_with_foreign_profile(self, gateway):
        source = SimpleNamespace(number=None, gateway_customer_profile_id='CUS-123')

        assert gateway.authorize(1000, source).success is False

    def test_purchase_matches_authorize(self, gateway, valid_card, invalid_card):
        assert gateway.purchase(1000, valid_card).success is True
        assert gateway.purchase(1000, invalid_card).success is False

    def test_capture(self, gateway):
        assert gateway.capture(1000, '12345').success is True
        assert gateway.capture(1000, '54321').success is False

    def test_void_and_credit(self, gateway):
        assert gateway.void('12345').success is True
        assert gateway.credit(500, '12345').params == {'amount': 500}

    def test_live_mode(self, valid_card):
        gateway = BogusGateway(mode='live')

        assert gateway.authorize(1000, valid_card).test is False


class TestOfflineGateway:
    """Tests for offline settlement"""

    def test_everything_succeeds(self):
        gateway = OfflineGateway()

        assert gateway.authorize(1000).success is True
        assert gateway.purchase(1000).params == {'amount': 1000}
        assert gateway.capture(1000).success is True
        assert gateway.void().success is True
        assert gateway.credit(1000).success is True
