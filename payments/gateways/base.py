"""
Base classes for payment gateway abstraction.

A gateway is the object a payment method hands authorize/purchase/capture/
void/credit calls to. It is the only place that talks to a provider's API.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


GATEWAY_MODES = ('test', 'live')


@dataclass
class GatewayResponse:
    """
    Standardized result of a gateway operation.

    Gateways report failures through this object instead of raising, so
    callers always get a response back from a dispatch call.

    Attributes:
        success: Whether the operation succeeded
        message: Human-readable message from the gateway
        authorization: External transaction reference, if any
        params: Extra response data (amounts, statuses, ids)
        test: Whether the gateway ran in test mode
        error_code: Machine-readable error code for programmatic handling
        gateway_response: Raw provider response for debugging and logging
    """
    success: bool
    message: str = ''
    authorization: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)
    test: bool = False
    error_code: Optional[str] = None
    gateway_response: Optional[Dict[str, Any]] = None

    def __bool__(self):
        return self.success


class GatewayException(Exception):
    """
    Raised for gateway configuration problems (unknown gateway, bad class,
    missing credentials). Transaction failures are returned as
    unsuccessful GatewayResponse objects instead.
    """
    def __init__(self, message: str, error_code: Optional[str] = None, gateway_response: Optional[Dict] = None):
        self.message = message
        self.error_code = error_code
        self.gateway_response = gateway_response
        super().__init__(self.message)


class BasePaymentGateway(ABC):
    """
    Abstract base class for payment gateway implementations.

    Gateways are built from a payment method's preference snapshot and an
    explicit mode ('test' or 'live'). The mode belongs to the instance; there
    is no process-wide switch.

    Methods:
        - authorize: reserve funds on a source
        - purchase: authorize and capture in one step
        - capture: settle a previous authorization
        - void: cancel an authorization before settlement
        - credit: refund a settled transaction
    """

    def __init__(self, options: Optional[Dict[str, Any]] = None, mode: str = 'test'):
        """
        Initialize the payment gateway.

        Args:
            options: Preference values of the owning payment method
            mode: 'test' or 'live'
        """
        mode = str(mode or 'test').lower()
        if mode not in GATEWAY_MODES:
            # 'production' and friends all mean live traffic
            mode = 'live'
        self.options = dict(options or {})
        self.mode = mode

    @property
    def test(self) -> bool:
        """True when the gateway talks to the provider's sandbox"""
        return self.mode == 'test'

    @abstractmethod
    def authorize(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Authorize an amount on a payment source.

        Args:
            amount: Amount in the smallest currency unit
            source: Payment source (e.g. a CreditCard)
            options: Order/transaction context (order_id, currency, ...)

        Returns:
            GatewayResponse with the authorization reference on success
        """
        pass

    @abstractmethod
    def purchase(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Authorize and capture an amount in a single call.
        """
        pass

    @abstractmethod
    def capture(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Capture a previously authorized amount.

        Args:
            amount: Amount to capture in the smallest currency unit
            response_code: Authorization reference returned by authorize()
            options: Transaction context
        """
        pass

    @abstractmethod
    def void(self, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Void an authorization that has not been captured.
        """
        pass

    @abstractmethod
    def credit(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Refund an amount against a captured transaction.
        """
        pass
