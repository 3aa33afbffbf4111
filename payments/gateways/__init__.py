"""
Payment gateway abstraction layer.

Provides a unified interface for the providers payment methods dispatch to.
"""

from .base import BasePaymentGateway, GatewayResponse, GatewayException
from .bogus import BogusGateway
from .offline import OfflineGateway
from .razorpay_gateway import RazorpayGateway
from .factory import (
    build_gateway,
    get_gateway,
    get_gateway_class,
    register_gateway,
    list_available_gateways,
    gateway_cache,
)

__all__ = [
    'BasePaymentGateway',
    'GatewayResponse',
    'GatewayException',
    'BogusGateway',
    'OfflineGateway',
    'RazorpayGateway',
    'build_gateway',
    'get_gateway',
    'get_gateway_class',
    'register_gateway',
    'list_available_gateways',
    'gateway_cache',
]
