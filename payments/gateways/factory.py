"""
Payment gateway factory.

Builds gateway instances for payment methods from their preferences and keeps
one cached instance per payment method. New gateways can be registered at
runtime without touching the payment method model.
"""

import json
import logging
import threading
from typing import Optional
from .base import BasePaymentGateway, GatewayException
from .bogus import BogusGateway
from .offline import OfflineGateway
from .razorpay_gateway import RazorpayGateway

logger = logging.getLogger(__name__)


# Gateway registry - maps gateway names to their classes
GATEWAY_REGISTRY = {
    'bogus': BogusGateway,
    'offline': OfflineGateway,
    'razorpay': RazorpayGateway,
}


def get_gateway_class(gateway_name: str) -> type:
    """
    Look up a registered gateway class.

    Raises:
        GatewayException: If the gateway is not registered
    """
    gateway_name = gateway_name.lower().strip()

    if gateway_name not in GATEWAY_REGISTRY:
        supported = ', '.join(GATEWAY_REGISTRY.keys())
        raise GatewayException(
            message=f"Unsupported payment gateway: {gateway_name}. Supported gateways: {supported}",
            error_code='unsupported_gateway'
        )

    return GATEWAY_REGISTRY[gateway_name]


def register_gateway(name: str, gateway_class: type):
    """
    Register a new payment gateway.

    Args:
        name: Gateway identifier (e.g., 'custom_gateway')
        gateway_class: Gateway class that extends BasePaymentGateway

    Example:
        >>> from myapp.gateways import CustomGateway
        >>> register_gateway('custom', CustomGateway)
    """
    if not isinstance(gateway_class, type) or not issubclass(gateway_class, BasePaymentGateway):
        raise GatewayException(
            message="Gateway class must extend BasePaymentGateway",
            error_code='invalid_gateway_class'
        )

    GATEWAY_REGISTRY[name.lower()] = gateway_class


def list_available_gateways():
    """
    List all registered payment gateways.
    """
    return list(GATEWAY_REGISTRY.keys())


def gateway_options(payment_method) -> dict:
    """
    Preference snapshot handed to a gateway.

    A 'login' preference that is present but None is dropped so gateways
    can tell "not configured" apart from "configured as empty".
    """
    options = payment_method.options()
    if 'login' in options and options['login'] is None:
        del options['login']
    return options


def build_gateway(payment_method) -> BasePaymentGateway:
    """
    Construct a fresh gateway for a payment method.

    The 'server' preference is passed to the gateway as its mode instead of
    being applied globally, so gateways in different modes can coexist.
    """
    options = gateway_options(payment_method)
    mode = options.get('server') or 'test'
    gateway_class = payment_method.gateway_class()

    logger.info(
        "Building payment gateway",
        extra={
            'payment_method_id': payment_method.pk,
            'gateway_class': gateway_class.__name__,
            'mode': mode,
        }
    )
    return gateway_class(options, mode=mode)


class GatewayCache:
    """
    Process-local cache of gateway instances keyed by payment method id.

    An entry is rebuilt when the payment method's options no longer match
    the options it was built from. Construction for a given id happens at
    most once per options snapshot.
    """

    def __init__(self):
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, payment_method) -> BasePaymentGateway:
        fingerprint = _fingerprint(payment_method)

        with self._lock:
            entry = self._entries.get(payment_method.pk)
            if entry is not None and entry[0] == fingerprint:
                return entry[1]

            gateway = build_gateway(payment_method)
            self._entries[payment_method.pk] = (fingerprint, gateway)
            return gateway

    def invalidate(self, payment_method_id):
        with self._lock:
            if self._entries.pop(payment_method_id, None) is not None:
                logger.info(
                    "Invalidated cached payment gateway",
                    extra={'payment_method_id': payment_method_id}
                )

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __contains__(self, payment_method_id):
        return payment_method_id in self._entries


def _fingerprint(payment_method) -> str:
    return json.dumps(
        {'type': payment_method.type, 'options': gateway_options(payment_method)},
        sort_keys=True,
        default=str
    )


gateway_cache = GatewayCache()


def get_gateway(payment_method) -> BasePaymentGateway:
    """
    Get the gateway for a payment method.

    Saved payment methods share a cached instance; unsaved ones cache the
    gateway on the instance itself.

    Example:
        >>> gateway = get_gateway(payment_method)
        >>> response = gateway.authorize(1000, credit_card, {'order_id': 'R123'})
    """
    if payment_method.pk is not None:
        return gateway_cache.get(payment_method)

    fingerprint = _fingerprint(payment_method)
    cached: Optional[tuple] = getattr(payment_method, '_gateway_cache', None)
    if cached is None or cached[0] != fingerprint:
        cached = (fingerprint, build_gateway(payment_method))
        payment_method._gateway_cache = cached
    return cached[1]
