"""
Bogus gateway for development and test environments.

Approves a fixed set of test card numbers (or sources carrying a BGS- customer
profile) and declines everything else. Never talks to a network.
"""

from typing import Optional, Dict, Any
from .base import BasePaymentGateway, GatewayResponse


class BogusGateway(BasePaymentGateway):
    """
    Test gateway with deterministic results.
    """

    SUPPORTED_BRANDS = ['visa', 'master', 'american_express', 'discover', 'diners_club', 'jcb']
    VALID_CCS = ['1', '4111111111111111', '4012888888881881', '4222222222222']
    AUTHORIZATION_CODE = '12345'
    SUCCESS_MESSAGE = 'Bogus Gateway: Forced success'
    FAILURE_MESSAGE = 'Bogus Gateway: Forced failure'
    PROFILE_PREFIX = 'BGS-'

    def authorize(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        if self._approves(source):
            return self._success(params={'amount': amount, 'avs_result': {'code': 'D'}})
        return self._failure(params={'amount': amount})

    def purchase(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        return self.authorize(amount, source, options)

    def capture(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        if response_code == self.AUTHORIZATION_CODE:
            return self._success(params={'amount': amount})
        return self._failure(params={'amount': amount})

    def void(self, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        return self._success()

    def credit(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        return self._success(params={'amount': amount})

    def _approves(self, source) -> bool:
        if getattr(source, 'number', None) in self.VALID_CCS:
            return True
        profile_id = getattr(source, 'gateway_customer_profile_id', None)
        return bool(profile_id) and profile_id.startswith(self.PROFILE_PREFIX)

    def _success(self, params=None):
        return GatewayResponse(
            success=True,
            message=self.SUCCESS_MESSAGE,
            authorization=self.AUTHORIZATION_CODE,
            params=params or {},
            test=self.test,
        )

    def _failure(self, params=None):
        return GatewayResponse(
            success=False,
            message=self.FAILURE_MESSAGE,
            params={'message': self.FAILURE_MESSAGE, **(params or {})},
            test=self.test,
            error_code='declined',
        )
