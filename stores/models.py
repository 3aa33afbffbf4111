from django.db import models
from django.utils.text import slugify


class Store(models.Model):
    """
    A storefront selling through the platform.

    A store may restrict itself to a set of payment methods. A store with no
    payment methods of its own accepts every payment method.
    """
    name = models.CharField(
        max_length=255,
        help_text="Store display name"
    )
    code = models.SlugField(
        max_length=255,
        unique=True,
        help_text="URL-friendly identifier for the store"
    )
    url = models.CharField(max_length=255, blank=True, default='')
    payment_methods = models.ManyToManyField(
        'payments.PaymentMethod',
        through='StorePaymentMethod',
        related_name='stores',
        blank=True,
        help_text="Payment methods this store accepts; empty means all"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Store'
        verbose_name_plural = 'Stores'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        """Auto-generate code from name if not provided"""
        if not self.code:
            base_code = slugify(self.name)
            code = base_code
            counter = 1

            # Ensure code is unique by appending counter if needed
            while Store.objects.filter(code=code).exists():
                code = f"{base_code}-{counter}"
                counter += 1

            self.code = code

        super().save(*args, **kwargs)


class StorePaymentMethod(models.Model):
    """
    Links a store to a payment method it accepts.
    """
    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name='store_payment_methods'
    )
    payment_method = models.ForeignKey(
        'payments.PaymentMethod',
        on_delete=models.CASCADE,
        related_name='store_payment_methods'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ['store', 'payment_method']
        verbose_name = 'Store Payment Method'
        verbose_name_plural = 'Store Payment Methods'

    def __str__(self):
        return f"{self.store.name} - {self.payment_method.name}"
