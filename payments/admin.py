"""
Django Admin configuration for Payments app.

Provides admin interfaces for:
- Payment methods (with activation actions; deleting soft-deletes)
- Credit cards (read-only gateway profile details)
- Payments (with state filters)
"""

from django.contrib import admin
from django.utils.html import format_html
from .models import PaymentMethod, CreditCard, Payment


@admin.register(PaymentMethod)
class PaymentMethodAdmin(admin.ModelAdmin):
    """
    Admin interface for PaymentMethod model.

    Deleting from the admin soft-deletes; soft-deleted payment methods
    drop out of the list.
    """

    list_display = [
        'name',
        'type',
        'position',
        'is_active_display',
        'available_to_users',
        'available_to_admin',
        'auto_capture',
        'updated_at',
    ]

    list_filter = [
        'type',
        'active',
        'available_to_users',
        'available_to_admin',
    ]

    search_fields = [
        'name',
        'type',
    ]

    readonly_fields = [
        'id',
        'position',
        'created_at',
        'updated_at',
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'name', 'type', 'description', 'position')
        }),
        ('Availability', {
            'fields': ('active', 'available_to_users', 'available_to_admin', 'auto_capture')
        }),
        ('Gateway Configuration', {
            'fields': ('preferences',),
            'description': 'JSON object of preferences declared by the payment method type'
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at')
        }),
    )

    actions = ['activate', 'deactivate']

    def is_active_display(self, obj):
        """Display active status with color coding"""
        if obj.active:
            return format_html('<span style="color: green; font-weight: bold;">{}</span>', 'Active')
        return format_html('<span style="color: gray; font-weight: bold;">{}</span>', 'Inactive')
    is_active_display.short_description = 'Status'
    is_active_display.admin_order_field = 'active'

    def activate(self, request, queryset):
        # save() per object so cached gateways are invalidated
        count = 0
        for payment_method in queryset:
            payment_method.active = True
            payment_method.save(update_fields=['active', 'updated_at'])
            count += 1
        self.message_user(request, f"Activated {count} payment method(s).")
    activate.short_description = "Activate selected payment methods"

    def deactivate(self, request, queryset):
        count = 0
        for payment_method in queryset:
            payment_method.active = False
            payment_method.save(update_fields=['active', 'updated_at'])
            count += 1
        self.message_user(request, f"Deactivated {count} payment method(s).")
    deactivate.short_description = "Deactivate selected payment methods"


@admin.register(CreditCard)
class CreditCardAdmin(admin.ModelAdmin):

    list_display = ['__str__', 'user', 'payment_method', 'month', 'year', 'default', 'created_at']
    list_filter = ['cc_type', 'default']
    search_fields = ['name', 'last_digits', 'user__email', 'gateway_customer_profile_id']
    readonly_fields = ['gateway_customer_profile_id', 'gateway_payment_profile_id', 'created_at', 'updated_at']

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        return super().get_queryset(request).select_related('user', 'payment_method')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):

    list_display = ['id', 'order_number', 'payment_method', 'amount_display', 'state', 'response_code', 'created_at']
    list_filter = ['state', 'payment_method']
    search_fields = ['order_number', 'response_code']
    readonly_fields = ['response_code', 'message', 'created_at', 'updated_at']

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        return super().get_queryset(request).select_related('payment_method')
