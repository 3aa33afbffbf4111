from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.db import models, transaction
from django.db.models import F, Max
from django.utils import timezone

from .deprecation import warn_deprecated
from .gateways.factory import get_gateway, gateway_cache
from .preferences import PreferenceStore
from .variants import get_variant, VARIANT_REGISTRY


class PaymentMethodQuerySet(models.QuerySet):
    """
    Filters for choosing payment methods in a checkout context.
    """

    def ordered_by_position(self):
        return self.order_by('position')

    def active(self):
        return self.filter(active=True)

    def available_to_users(self):
        return self.filter(available_to_users=True)

    def available_to_admin(self):
        return self.filter(available_to_admin=True)

    def available_to_store(self, store):
        """
        Payment methods a store accepts.

        A store with no payment methods of its own accepts all of them.
        """
        if store is None:
            raise ValueError("You must provide a store")

        store_method_ids = list(store.payment_methods.values_list('pk', flat=True))
        if not store_method_ids:
            return self.all()
        return self.filter(pk__in=store_method_ids)

    def has_active_variant(self, variant):
        """True if at least one payment method of the given type is active"""
        return self.filter(type=variant, active=True).exists()

    def only_deleted(self):
        return self.filter(deleted_at__isnull=False)

    def delete(self):
        """Soft-delete every payment method in the queryset"""
        pks = list(self.filter(deleted_at__isnull=True).values_list('pk', flat=True))
        count = self.model.all_objects.filter(pk__in=pks).update(deleted_at=timezone.now())
        PaymentMethod.objects.compact_positions()
        for pk in pks:
            gateway_cache.invalidate(pk)
        return count, {self.model._meta.label: count}
    delete.queryset_only = True

    def hard_delete(self):
        result = super().delete()
        PaymentMethod.objects.compact_positions()
        return result
    hard_delete.queryset_only = True


class PaymentMethodManager(models.Manager.from_queryset(PaymentMethodQuerySet)):
    """
    Default manager. Hides soft-deleted payment methods.
    """

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)

    def with_deleted(self):
        return self.model.all_objects.all()

    def find_including_deleted(self, pk):
        return self.model.all_objects.get(pk=pk)

    def next_position(self):
        last = self.get_queryset().aggregate(last=Max('position'))['last']
        return (last or 0) + 1

    def compact_positions(self):
        """Renumber live payment methods 1..n, keeping their order"""
        ordered = self.get_queryset().order_by(F('position').asc(nulls_last=True), 'pk')
        for index, payment_method in enumerate(ordered, start=1):
            if payment_method.position != index:
                self.get_queryset().filter(pk=payment_method.pk).update(position=index)

    def providers(self):
        warn_deprecated(
            "PaymentMethod.objects.providers() is deprecated. "
            "Please use settings.PAYMENT_METHOD_VARIANTS instead"
        )
        return list(getattr(settings, 'PAYMENT_METHOD_VARIANTS', VARIANT_REGISTRY.keys()))

    def available(self, display_on=None, store=None):
        warn_deprecated(
            "PaymentMethod.objects.available() is deprecated. "
            "Please use .active(), .available_to_users() and .available_to_admin() instead. "
            "For payment methods associated with a specific store, use "
            "PaymentMethod.objects.available_to_store(store) as the base applying any further filtering"
        )

        display_on = '' if display_on is None else str(display_on)

        if display_on == 'front_end':
            available_payment_methods = self.active().available_to_users()
        elif display_on == 'back_end':
            available_payment_methods = self.active().available_to_admin()
        else:
            available_payment_methods = self.active().available_to_users().available_to_admin()

        store_method_ids = set()
        if store is not None:
            store_method_ids = set(store.payment_methods.values_list('pk', flat=True))

        return [
            payment_method for payment_method in available_payment_methods
            if store is None or not store_method_ids or payment_method.pk in store_method_ids
        ]


class PaymentMethod(models.Model):
    """
    A configured way of paying for an order (credit card gateway, check,
    store credit, ...).

    Every variant is stored in this table; `type` selects the variant that
    supplies gateway and source behavior. Payment methods are soft-deleted and
    kept in a position-ordered list.
    """
    name = models.CharField(
        max_length=255,
        help_text="Display name shown at checkout and in the admin"
    )
    type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Payment method variant (e.g. 'bogus_credit_card', 'check')"
    )
    description = models.TextField(blank=True, default='')
    active = models.BooleanField(
        default=True,
        help_text="Whether this payment method can be used at all"
    )
    available_to_users = models.BooleanField(
        default=True,
        help_text="Offer this payment method on the storefront"
    )
    available_to_admin = models.BooleanField(
        default=True,
        help_text="Offer this payment method in the admin"
    )
    position = models.IntegerField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Sort order; new payment methods go to the bottom"
    )
    auto_capture = models.BooleanField(
        null=True,
        blank=True,
        help_text="Capture on authorization. Empty uses the PAYMENT_AUTO_CAPTURE setting"
    )
    preferences = models.JSONField(
        default=dict,
        blank=True,
        help_text="Gateway configuration for this payment method"
    )
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PaymentMethodManager()
    all_objects = PaymentMethodQuerySet.as_manager()

    class Meta:
        ordering = ['position']
        verbose_name = 'Payment Method'
        verbose_name_plural = 'Payment Methods'
        indexes = [
            models.Index(fields=['type', 'active'], name='payment_method_type_active_idx'),
        ]

    def __str__(self):
        return self.name

    @classmethod
    def find_with_deleted(cls, pk):
        return cls.objects.find_including_deleted(pk)

    # Variant

    @property
    def variant(self):
        return get_variant(self.type)

    @property
    def preference_store(self):
        if self.preferences is None:
            self.preferences = {}
        return PreferenceStore(self.variant.preferences, self.preferences)

    def clean(self):
        super().clean()
        if not self.type:
            return
        try:
            variant = self.variant
        except ImproperlyConfigured as e:
            raise ValidationError({'type': str(e)})
        PreferenceStore(variant.preferences, self.preferences).validate()

    def save(self, *args, **kwargs):
        self.full_clean()
        self.preferences = self.preference_store.normalized()
        if self._state.adding:
            self.preferences = {**self.preference_store.defaults(), **self.preferences}
            if self.position is None and self.deleted_at is None:
                self.position = PaymentMethod.objects.next_position()
        super().save(*args, **kwargs)

    # Preferences

    def get_preference(self, name):
        return self.preference_store.get(name)

    def set_preference(self, name, value):
        self.preference_store.set(name, value)

    def has_preference(self, name):
        return name in self.preference_store

    def options(self):
        """
        All preferences as a dict; this is what the gateway is built from.
        A login that was never set is left out.
        """
        options = self.preference_store.to_dict()
        if options.get('login', '') is None:
            del options['login']
        return options

    # Soft delete and list position

    def delete(self, using=None, keep_parents=False):
        """Soft-delete and close the gap in the position list"""
        if self.deleted_at is not None:
            return 0, {}
        with transaction.atomic():
            self.deleted_at = timezone.now()
            self.save(update_fields=['deleted_at', 'updated_at'])
            if self.position is not None:
                PaymentMethod.objects.filter(position__gt=self.position).update(position=F('position') - 1)
        return 1, {self._meta.label: 1}

    def hard_delete(self, using=None, keep_parents=False):
        """Remove the row for good and close the gap it leaves"""
        with transaction.atomic():
            result = super().delete(using=using, keep_parents=keep_parents)
            PaymentMethod.objects.compact_positions()
        return result

    def restore(self):
        """Undo a soft delete; the payment method rejoins at the bottom"""
        if self.deleted_at is None:
            return
        self.position = PaymentMethod.objects.next_position()
        self.deleted_at = None
        self.save(update_fields=['deleted_at', 'position', 'updated_at'])

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def move_to(self, position):
        """
        Move to a 1-based position, shifting the payment methods in between.
        Out-of-range positions are clamped to the list.
        """
        if self.is_deleted:
            raise ValidationError("Deleted payment methods cannot be reordered")

        with transaction.atomic():
            live = PaymentMethod.objects.all()
            position = max(1, min(int(position), live.count()))
            current = live.values_list('position', flat=True).get(pk=self.pk)

            if position < current:
                live.filter(position__gte=position, position__lt=current).update(position=F('position') + 1)
            elif position > current:
                live.filter(position__gt=current, position__lte=position).update(position=F('position') - 1)

            self.position = position
            self.save(update_fields=['position', 'updated_at'])

    # Gateway dispatch

    @property
    def gateway(self):
        """
        The gateway this payment method talks to.

        Responsible for authorize, purchase, capture, void and credit.
        """
        return get_gateway(self)

    @property
    def provider(self):
        warn_deprecated("PaymentMethod.provider is deprecated. Please use PaymentMethod.gateway instead")
        return self.gateway

    def gateway_class(self):
        return self.variant.gateway_class(self)

    @property
    def provider_class(self):
        warn_deprecated("PaymentMethod.provider_class is deprecated. Please use PaymentMethod.gateway_class() instead")
        return self.gateway_class()

    def authorize(self, *args, **kwargs):
        return self.gateway.authorize(*args, **kwargs)

    def purchase(self, *args, **kwargs):
        return self.gateway.purchase(*args, **kwargs)

    def capture(self, *args, **kwargs):
        return self.gateway.capture(*args, **kwargs)

    def void(self, *args, **kwargs):
        return self.gateway.void(*args, **kwargs)

    def credit(self, *args, **kwargs):
        return self.gateway.credit(*args, **kwargs)

    # Variant capabilities

    def payment_source_class(self):
        return self.variant.payment_source_class(self)

    def method_type(self):
        return self.variant.method_type()

    def payment_profiles_supported(self):
        return self.variant.payment_profiles_supported(self)

    def source_required(self):
        return self.variant.source_required(self)

    def reusable_sources(self, order):
        return self.variant.reusable_sources(self, order)

    def is_auto_capture(self):
        if self.auto_capture is None:
            return getattr(settings, 'PAYMENT_AUTO_CAPTURE', False)
        return self.auto_capture

    def supports(self, source):
        return self.variant.supports(self, source)

    def cancel(self, response):
        return self.variant.cancel(self, response)

    def is_store_credit(self):
        return self.variant.is_store_credit()

    # Legacy display_on

    @property
    def display_on(self):
        warn_deprecated(
            "PaymentMethod.display_on is deprecated. "
            "Please use available_to_users and available_to_admin instead."
        )
        if self.available_to_users and self.available_to_admin:
            return ''
        if self.available_to_users:
            return 'front_end'
        if self.available_to_admin:
            return 'back_end'
        return 'none'

    @display_on.setter
    def display_on(self, value):
        warn_deprecated(
            "Setting PaymentMethod.display_on is deprecated. "
            "Please set available_to_users and available_to_admin instead."
        )
        blank = value is None or not str(value).strip()
        self.available_to_users = blank or value == 'front_end'
        self.available_to_admin = blank or value == 'back_end'


class CreditCardQuerySet(models.QuerySet):

    def with_payment_profile(self):
        return self.filter(
            models.Q(gateway_customer_profile_id__gt='') | models.Q(gateway_payment_profile_id__gt='')
        )


class CreditCard(models.Model):
    """
    A card stored for reuse with a payment method.

    The full card number is never persisted; it only lives on the instance
    long enough to be sent to the gateway.
    """
    BRAND_CHOICES = [
        ('visa', 'Visa'),
        ('master', 'Mastercard'),
        ('american_express', 'American Express'),
        ('discover', 'Discover'),
        ('diners_club', 'Diners Club'),
        ('jcb', 'JCB'),
        ('maestro', 'Maestro'),
        ('rupay', 'RuPay'),
    ]

    payment_method = models.ForeignKey(
        PaymentMethod,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='credit_cards',
        help_text="Payment method this card was stored with"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='credit_cards'
    )
    name = models.CharField(max_length=255, blank=True, default='')
    cc_type = models.CharField(max_length=50, choices=BRAND_CHOICES, blank=True, default='')
    last_digits = models.CharField(max_length=4, blank=True, default='')
    month = models.PositiveSmallIntegerField(null=True, blank=True)
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    gateway_customer_profile_id = models.CharField(max_length=255, blank=True, default='')
    gateway_payment_profile_id = models.CharField(max_length=255, blank=True, default='')
    default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CreditCardQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Credit Card'
        verbose_name_plural = 'Credit Cards'

    def __str__(self):
        if self.last_digits:
            return f"{self.get_cc_type_display() or 'Card'} ending in {self.last_digits}"
        return self.name or 'Credit card'

    @property
    def number(self):
        return getattr(self, '_number', None)

    @number.setter
    def number(self, value):
        self._number = ''.join(str(value).split()) if value else None
        if self._number:
            self.last_digits = self._number[-4:]

    def is_reusable(self):
        return bool(self.gateway_customer_profile_id or self.gateway_payment_profile_id)


class Payment(models.Model):
    """
    A single payment made with a payment method.
    """
    STATE_CHOICES = [
        ('checkout', 'Checkout'),
        ('pending', 'Pending'),
        ('completed', 'Completed'),
        ('failed', 'Failed'),
        ('void', 'Void'),
        ('refunded', 'Refunded'),
    ]

    payment_method = models.ForeignKey(
        PaymentMethod,
        on_delete=models.PROTECT,
        related_name='payments'
    )
    source = models.ForeignKey(
        CreditCard,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments'
    )
    order_number = models.CharField(max_length=64, blank=True, default='')
    amount_cents = models.IntegerField(help_text="Amount in the smallest currency unit")
    currency = models.CharField(max_length=3, default='USD')
    state = models.CharField(max_length=20, choices=STATE_CHOICES, default='checkout')
    response_code = models.CharField(max_length=255, blank=True, default='')
    message = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        indexes = [
            models.Index(fields=['payment_method', 'state'], name='payment_method_state_idx'),
        ]

    def __str__(self):
        return f"Payment {self.pk} - {self.payment_method.name} ({self.state})"

    @property
    def amount_display(self):
        return f"{Decimal(self.amount_cents) / 100:.2f} {self.currency}"

    def gateway_options(self):
        return {'order_id': self.order_number, 'currency': self.currency}
