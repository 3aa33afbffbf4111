import logging
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction

from .gateways.base import GatewayResponse
from .models import Payment

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Service layer for payments.
    Runs payments through their payment method's gateway and records the outcome.

    Gateway declines come back as unsuccessful GatewayResponse objects and
    are recorded on the payment; they are never raised.
    """

    @staticmethod
    def process(payment: Payment) -> GatewayResponse:
        """
        Authorize a payment, or purchase it outright when the payment method
        auto-captures.

        Raises:
            ValidationError: If the payment is not in checkout state, or the
                source is missing or unsupported
        """
        payment_method = payment.payment_method
        _require_state(payment, {'checkout'})

        if payment_method.source_required():
            if payment.source is None:
                raise ValidationError({'source': "This payment method requires a payment source"})
            if not payment_method.supports(payment.source):
                raise ValidationError({'source': "Payment source is not supported by this payment method"})

        if payment_method.is_auto_capture():
            response = payment_method.purchase(payment.amount_cents, payment.source, payment.gateway_options())
            success_state = 'completed'
        else:
            response = payment_method.authorize(payment.amount_cents, payment.source, payment.gateway_options())
            success_state = 'pending'

        return _record(payment, response, success_state, failure_state='failed')

    @staticmethod
    def capture(payment: Payment, amount_cents: Optional[int] = None) -> GatewayResponse:
        """
        Capture an authorized payment. Defaults to the full amount.
        """
        _require_state(payment, {'pending'})
        response = payment.payment_method.capture(
            amount_cents if amount_cents is not None else payment.amount_cents,
            payment.response_code,
            payment.gateway_options()
        )
        return _record(payment, response, 'completed')

    @staticmethod
    def void(payment: Payment) -> GatewayResponse:
        _require_state(payment, {'pending', 'completed'})
        response = payment.payment_method.void(payment.response_code, payment.gateway_options())
        return _record(payment, response, 'void')

    @staticmethod
    def credit(payment: Payment, amount_cents: Optional[int] = None) -> GatewayResponse:
        """
        Refund a completed payment. Defaults to the full amount.
        """
        _require_state(payment, {'completed'})
        response = payment.payment_method.credit(
            amount_cents if amount_cents is not None else payment.amount_cents,
            payment.response_code,
            payment.gateway_options()
        )
        return _record(payment, response, 'refunded')

    @staticmethod
    def cancel(payment: Payment) -> GatewayResponse:
        """
        Cancel a payment the way its payment method cancels (void or refund).
        """
        _require_state(payment, {'pending', 'completed'})
        response = payment.payment_method.cancel(payment.response_code)
        # a cancel that fell back to a refund answers with the refunded payment id
        success_state = 'refunded' if response.params.get('payment_id') else 'void'
        return _record(payment, response, success_state)


def _require_state(payment, states):
    if payment.state not in states:
        raise ValidationError(
            {'state': f"Payment is {payment.state}; expected one of {', '.join(sorted(states))}"}
        )


def _record(payment, response, success_state, failure_state=None):
    if response.success:
        payment.state = success_state
        if response.authorization and success_state in ('pending', 'completed'):
            payment.response_code = response.authorization
    else:
        logger.warning(
            "Payment gateway declined operation",
            extra={
                'payment_id': payment.pk,
                'payment_method_id': payment.payment_method_id,
                'error_code': response.error_code,
                'gateway_message': response.message,
            }
        )
        if failure_state:
            payment.state = failure_state

    payment.message = response.message or ''
    with transaction.atomic():
        payment.save(update_fields=['state', 'response_code', 'message', 'updated_at'])
    return response
