"""
Payment method variants.

All payment methods live in one table; the `type` column names a variant and
the variant object supplies the behavior (gateway class, payment source class,
preferences, source checks). Variants hold no state of their own: every
method receives the payment method record it acts for.

Adding a variant:

    @register_variant
    class Cheque(PaymentMethodVariant):
        tag = 'cheque'
        label = 'Cheque'
        ...
"""

from django.core.exceptions import ImproperlyConfigured

from .deprecation import warn_deprecated
from .gateways.factory import get_gateway_class
from .preferences import Preference


# Variant registry - maps type tags to variant instances
VARIANT_REGISTRY = {}


def register_variant(variant_class):
    """Class decorator adding a variant to the registry under its tag"""
    if not variant_class.tag:
        raise ImproperlyConfigured(f"{variant_class.__name__} must define a tag")
    VARIANT_REGISTRY[variant_class.tag] = variant_class()
    return variant_class


def unregister_variant(tag):
    VARIANT_REGISTRY.pop(tag, None)


def get_variant(tag):
    """
    Look up the variant for a type tag.

    Raises:
        ImproperlyConfigured: If no variant is registered under the tag
    """
    try:
        return VARIANT_REGISTRY[tag]
    except KeyError:
        raise ImproperlyConfigured(f"Unknown payment method type: {tag!r}")


def variant_choices():
    return [(tag, variant.label or tag) for tag, variant in VARIANT_REGISTRY.items()]


class PaymentMethodVariant:
    """
    Base behavior shared by every payment method variant.

    Concrete variants must implement gateway_class() (or the legacy
    provider_class()), payment_source_class() and cancel().
    """
    tag = None
    label = None
    preferences = (
        Preference('server', 'string', 'test'),
        Preference('test_mode', 'boolean', True),
    )

    def gateway_class(self, payment_method):
        if hasattr(self, 'provider_class'):
            warn_deprecated(
                "provider_class is deprecated and will be removed "
                "(use gateway_class instead)"
            )
            return self.provider_class(payment_method)
        raise NotImplementedError(
            f"You must implement gateway_class method for {type(self).__name__}."
        )

    def payment_source_class(self, payment_method):
        """
        Model storing payment sources (re)usable with this method.

        None means the method doesn't store sources.
        """
        raise NotImplementedError(
            f"You must implement payment_source_class method for {type(self).__name__}."
        )

    def method_type(self):
        """Name of the checkout and admin partials for this variant"""
        return type(self).__name__.lower()

    def payment_profiles_supported(self, payment_method):
        return False

    def source_required(self, payment_method):
        return True

    def reusable_sources(self, payment_method, order):
        return []

    def supports(self, payment_method, source):
        return True

    def cancel(self, payment_method, response):
        raise NotImplementedError('You must implement cancel method for this payment method.')

    def is_store_credit(self):
        return False


class CreditCardVariant(PaymentMethodVariant):
    """
    Variants charging stored credit cards through a remote gateway.
    """
    preferences = PaymentMethodVariant.preferences + (
        Preference('login', 'string', None),
        Preference('password', 'password', None),
    )

    def payment_source_class(self, payment_method):
        from .models import CreditCard
        return CreditCard

    def reusable_sources(self, payment_method, order):
        """Cards with a gateway profile that belong to the order's user"""
        user = getattr(order, 'user', None)
        if user is None or user.pk is None:
            return []
        return list(
            self.payment_source_class(payment_method).objects
            .filter(payment_method=payment_method, user=user)
            .with_payment_profile()
            .order_by('-default', '-created_at')
        )

    def supports(self, payment_method, source):
        brand = getattr(source, 'cc_type', None)
        if not brand:
            return True
        supported = getattr(payment_method.gateway_class(), 'SUPPORTED_BRANDS', None)
        if supported is None:
            return True
        return brand in supported


@register_variant
class BogusCreditCard(CreditCardVariant):
    tag = 'bogus_credit_card'
    label = 'Bogus Credit Card'

    def gateway_class(self, payment_method):
        return get_gateway_class('bogus')

    def payment_profiles_supported(self, payment_method):
        return True

    def cancel(self, payment_method, response):
        return payment_method.void(response)


@register_variant
class SimpleBogusCreditCard(BogusCreditCard):
    tag = 'simple_bogus_credit_card'
    label = 'Simple Bogus Credit Card'

    def payment_profiles_supported(self, payment_method):
        return False


@register_variant
class Razorpay(CreditCardVariant):
    tag = 'razorpay'
    label = 'Razorpay'
    preferences = PaymentMethodVariant.preferences + (
        Preference('key_id', 'string', None),
        Preference('key_secret', 'password', None),
        Preference('currency', 'string', 'INR'),
    )

    def gateway_class(self, payment_method):
        return get_gateway_class('razorpay')

    def cancel(self, payment_method, response):
        """Release the authorization, or refund in full once captured"""
        result = payment_method.void(response)
        if result.success:
            return result
        return payment_method.credit(None, response)


@register_variant
class Check(PaymentMethodVariant):
    tag = 'check'
    label = 'Check'

    def gateway_class(self, payment_method):
        return get_gateway_class('offline')

    def payment_source_class(self, payment_method):
        return None

    def source_required(self, payment_method):
        return False

    def cancel(self, payment_method, response):
        return payment_method.void(response)


@register_variant
class StoreCredit(PaymentMethodVariant):
    tag = 'store_credit'
    label = 'Store Credit'

    def gateway_class(self, payment_method):
        return get_gateway_class('offline')

    def payment_source_class(self, payment_method):
        return None

    def cancel(self, payment_method, response):
        return payment_method.void(response)

    def is_store_credit(self):
        return True
