"""
Gateway for payment methods settled outside the system (checks, store credit).
Every operation is a simulated success.
"""

from typing import Optional, Dict, Any
from .base import BasePaymentGateway, GatewayResponse


class OfflineGateway(BasePaymentGateway):

    def authorize(self, amount: int, source: Any = None, options: Optional[Dict] = None) -> GatewayResponse:
        return self._simulated_success(amount=amount)

    def purchase(self, amount: int, source: Any = None, options: Optional[Dict] = None) -> GatewayResponse:
        return self._simulated_success(amount=amount)

    def capture(self, amount: int, response_code: str = None, options: Optional[Dict] = None) -> GatewayResponse:
        return self._simulated_success(amount=amount)

    def void(self, response_code: str = None, options: Optional[Dict] = None) -> GatewayResponse:
        return self._simulated_success()

    def credit(self, amount: int, response_code: str = None, options: Optional[Dict] = None) -> GatewayResponse:
        return self._simulated_success(amount=amount)

    def _simulated_success(self, **params):
        return GatewayResponse(success=True, params=params, test=self.test)
