from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from .gateways.factory import gateway_cache
from .models import PaymentMethod


@receiver(post_save, sender=PaymentMethod)
@receiver(post_delete, sender=PaymentMethod)
def invalidate_cached_gateway(sender, instance, **kwargs):
    """
    Drop the cached gateway of a payment method that was saved or deleted.

    The next dispatch call rebuilds the gateway from the stored preferences.
    """
    gateway_cache.invalidate(instance.pk)
