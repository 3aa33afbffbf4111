"""
Razorpay payment gateway implementation.

Implements the BasePaymentGateway interface on top of Razorpay's payments API.
Razorpay payments are authorized by Razorpay Checkout on the client side; the
server verifies the authorization, captures it, and refunds it.
"""

import razorpay
import logging
from typing import Optional, Dict, Any
from django.conf import settings
from .base import BasePaymentGateway, GatewayResponse, GatewayException

logger = logging.getLogger(__name__)


class RazorpayGateway(BasePaymentGateway):
    """
    Razorpay gateway implementation.

    Preferences:
        key_id: Razorpay Key ID (rzp_test_... or rzp_live_...)
        key_secret: Razorpay Key Secret
        currency: Default currency for captures (defaults to INR)
    """

    DEFAULT_CURRENCY = 'INR'
    SUPPORTED_BRANDS = ['visa', 'master', 'american_express', 'diners_club', 'maestro', 'rupay']

    def __init__(self, options: Optional[Dict[str, Any]] = None, mode: str = 'test'):
        """
        Initialize Razorpay client.

        Credentials missing from the preferences fall back to the
        RAZORPAY_KEY_ID / RAZORPAY_KEY_SECRET settings.
        """
        super().__init__(options, mode)
        self.key_id = self.options.get('key_id') or getattr(settings, 'RAZORPAY_KEY_ID', None)
        self.key_secret = self.options.get('key_secret') or getattr(settings, 'RAZORPAY_KEY_SECRET', None)

        if not self.key_id or not self.key_secret:
            raise GatewayException(
                message="Missing configuration for razorpay: key_id and key_secret are required",
                error_code='gateway_config_missing'
            )

        if not self.test and self.key_id.startswith('rzp_test_'):
            logger.warning(
                "Razorpay gateway running in live mode with a test key",
                extra={'key_id': self.key_id}
            )

        self.client = razorpay.Client(auth=(self.key_id, self.key_secret))

    def authorize(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Verify that a Razorpay payment is authorized for the expected amount.

        The Razorpay payment id comes from options['razorpay_payment_id'] or
        from the source's gateway_payment_profile_id.
        """
        options = options or {}
        payment_id = options.get('razorpay_payment_id') or getattr(source, 'gateway_payment_profile_id', None)
        if not payment_id:
            return self._failure("No Razorpay payment id supplied", 'missing_payment_id')

        try:
            payment = self.client.payment.fetch(payment_id)
        except razorpay.errors.BadRequestError as e:
            logger.warning(
                "Razorpay payment not found",
                extra={'payment_id': payment_id, 'error': str(e)}
            )
            return self._failure(f"Payment not found: {str(e)}", 'payment_not_found')
        except (razorpay.errors.ServerError, razorpay.errors.GatewayError) as e:
            return self._error("fetching Razorpay payment", payment_id, e)

        if payment.get('status') != 'authorized':
            return self._failure(
                f"Payment is {payment.get('status')}, expected authorized",
                'invalid_payment_status',
                gateway_response=payment
            )

        if payment.get('amount') != amount:
            return self._failure(
                f"Authorized amount {payment.get('amount')} does not match {amount}",
                'amount_mismatch',
                gateway_response=payment
            )

        return GatewayResponse(
            success=True,
            message='Payment authorized',
            authorization=payment['id'],
            params={'amount': payment['amount'], 'currency': payment.get('currency')},
            test=self.test,
            gateway_response=payment
        )

    def purchase(self, amount: int, source: Any, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Verify the authorization and capture it straight away.
        """
        authorization = self.authorize(amount, source, options)
        if not authorization.success:
            return authorization
        return self.capture(amount, authorization.authorization, options)

    def capture(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Capture an authorized Razorpay payment.
        """
        options = options or {}
        currency = (options.get('currency') or self.options.get('currency') or self.DEFAULT_CURRENCY).upper()

        try:
            payment = self.client.payment.capture(response_code, amount, data={'currency': currency})
        except razorpay.errors.BadRequestError as e:
            logger.warning(
                "Failed to capture Razorpay payment",
                extra={'payment_id': response_code, 'amount': amount, 'error': str(e)}
            )
            return self._failure(
                f"Failed to capture payment: {str(e)}",
                'capture_failed',
                gateway_response=e.args[0] if e.args else None
            )
        except (razorpay.errors.ServerError, razorpay.errors.GatewayError) as e:
            return self._error("capturing Razorpay payment", response_code, e)

        return GatewayResponse(
            success=True,
            message='Payment captured',
            authorization=payment['id'],
            params={'amount': payment.get('amount'), 'status': payment.get('status')},
            test=self.test,
            gateway_response=payment
        )

    def void(self, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Release an uncaptured authorization.

        Razorpay has no explicit void call: authorized payments that are never
        captured are released automatically. Voiding therefore only succeeds
        while the payment is still in the authorized state.
        """
        try:
            payment = self.client.payment.fetch(response_code)
        except razorpay.errors.BadRequestError as e:
            return self._failure(f"Payment not found: {str(e)}", 'payment_not_found')
        except (razorpay.errors.ServerError, razorpay.errors.GatewayError) as e:
            return self._error("voiding Razorpay payment", response_code, e)

        if payment.get('status') != 'authorized':
            return self._failure(
                "Only authorized payments can be voided",
                'invalid_payment_status',
                gateway_response=payment
            )

        return GatewayResponse(
            success=True,
            message='Authorization will be released by Razorpay',
            authorization=payment['id'],
            test=self.test,
            gateway_response=payment
        )

    def credit(self, amount: int, response_code: str, options: Optional[Dict] = None) -> GatewayResponse:
        """
        Refund a captured Razorpay payment, fully or partially.

        An amount of None refunds the whole payment.
        """
        data = {} if amount is None else {'amount': amount}
        try:
            refund = self.client.payment.refund(response_code, data=data)
        except razorpay.errors.BadRequestError as e:
            logger.warning(
                "Failed to refund Razorpay payment",
                extra={'payment_id': response_code, 'amount': amount, 'error': str(e)}
            )
            return self._failure(
                f"Failed to refund payment: {str(e)}",
                'refund_failed',
                gateway_response=e.args[0] if e.args else None
            )
        except (razorpay.errors.ServerError, razorpay.errors.GatewayError) as e:
            return self._error("refunding Razorpay payment", response_code, e)

        return GatewayResponse(
            success=True,
            message='Payment refunded',
            authorization=refund['id'],
            params={'amount': refund.get('amount'), 'payment_id': refund.get('payment_id')},
            test=self.test,
            gateway_response=refund
        )

    def _failure(self, message, error_code, gateway_response=None):
        return GatewayResponse(
            success=False,
            message=message,
            test=self.test,
            error_code=error_code,
            gateway_response=gateway_response
        )

    def _error(self, action, payment_id, exc):
        logger.error(
            f"Unexpected error {action}",
            extra={'payment_id': payment_id, 'error': str(exc)},
            exc_info=True
        )
        return self._failure(f"Unexpected error {action}: {str(exc)}", 'unexpected_error')
