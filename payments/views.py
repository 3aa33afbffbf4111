from rest_framework import viewsets, status, filters
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

from .models import PaymentMethod
from .serializers import (
    PaymentMethodSerializer,
    AvailablePaymentMethodSerializer,
    MovePaymentMethodSerializer,
    AvailableQuerySerializer,
)
from stores.models import Store


class PaymentMethodViewSet(viewsets.ModelViewSet):
    """
    ViewSet for configuring payment methods.

    list/retrieve/create/update: staff only
    destroy: soft-deletes the payment method
    available: payment methods offered for a checkout context
    move: changes the position of a payment method
    restore: brings back a soft-deleted payment method
    """
    serializer_class = PaymentMethodSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ['type', 'active', 'available_to_users', 'available_to_admin']
    search_fields = ['name', 'description']
    ordering_fields = ['position', 'name', 'created_at']
    ordering = ['position']

    def get_permissions(self):
        """Any signed-in user may ask what is available; the rest is staff only"""
        if self.action == 'available':
            return [IsAuthenticated()]
        return [IsAuthenticated(), IsAdminUser()]

    def get_queryset(self):
        if self.action == 'restore':
            return PaymentMethod.objects.with_deleted()
        return PaymentMethod.objects.ordered_by_position()

    @action(detail=False, methods=['get'], url_path='available')
    def available(self, request):
        """
        Active payment methods for a display target and, optionally, a store.

        Query params:
            - display_on: 'front_end', 'back_end' or 'both' (default)
            - store: Store ID
        """
        # blank params fall back to their defaults
        params = AvailableQuerySerializer(
            data={key: value for key, value in request.query_params.items() if value}
        )
        params.is_valid(raise_exception=True)
        display_on = params.validated_data['display_on']

        queryset = PaymentMethod.objects.active()
        if display_on in ('front_end', 'both'):
            queryset = queryset.available_to_users()
        if display_on in ('back_end', 'both'):
            queryset = queryset.available_to_admin()

        store_id = params.validated_data.get('store')
        if store_id:
            store = get_object_or_404(Store, pk=store_id)
            queryset = queryset.available_to_store(store)

        serializer = AvailablePaymentMethodSerializer(queryset.ordered_by_position(), many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['post'], url_path='move')
    def move(self, request, pk=None):
        """
        Move a payment method to a new position.

        Request body:
            - position (int): 1-based target position
        """
        payment_method = self.get_object()

        serializer = MovePaymentMethodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment_method.move_to(serializer.validated_data['position'])
        payment_method.refresh_from_db()

        return Response(PaymentMethodSerializer(payment_method).data)

    @action(detail=True, methods=['post'], url_path='restore')
    def restore(self, request, pk=None):
        payment_method = self.get_object()
        if not payment_method.is_deleted:
            return Response(
                {'error': 'Payment method is not deleted'},
                status=status.HTTP_400_BAD_REQUEST
            )

        payment_method.restore()
        return Response(PaymentMethodSerializer(payment_method).data)
