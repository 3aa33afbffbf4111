"""
URL configuration for payments app.

Defines API endpoints for:
- Payment methods (staff CRUD, soft delete, move, restore)
- Payment methods available for a checkout context
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import PaymentMethodViewSet


# Create router for viewsets
router = DefaultRouter()
router.register(r'payment-methods', PaymentMethodViewSet, basename='paymentmethod')

urlpatterns = [
    path('', include(router.urls)),
]
