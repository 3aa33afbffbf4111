import logging
import warnings

logger = logging.getLogger(__name__)


class PaymentMethodDeprecationWarning(DeprecationWarning):
    """Raised for payment method APIs scheduled for removal"""


def warn_deprecated(message, stacklevel=3):
    """Emit a deprecation warning and log it, then let the caller proceed"""
    warnings.warn(message, PaymentMethodDeprecationWarning, stacklevel=stacklevel)
    logger.warning(message)
