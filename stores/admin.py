from django.contrib import admin
from .models import Store, StorePaymentMethod


class StorePaymentMethodInline(admin.TabularInline):
    """
    Inline admin for the payment methods a store accepts.
    Leave empty to accept every payment method.
    """
    model = StorePaymentMethod
    extra = 0
    autocomplete_fields = ['payment_method']


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'url', 'payment_method_count', 'created_at']
    search_fields = ['name', 'code']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [StorePaymentMethodInline]

    def payment_method_count(self, obj):
        """Number of payment methods the store is restricted to (0 = all)"""
        return obj.payment_methods.count()
    payment_method_count.short_description = 'Payment Methods'
