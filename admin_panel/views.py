from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
import logging

from authentication.permissions import IsAdmin
from orders.models import Order
from orders.services import OrderService
from orders.status_machine import InvalidStatusTransition, OPEN_STATUSES, offered_transitions
from orders.urgency import TIER_ORDER, group_by_urgency
from orders.views import filter_orders, order_pdf_response
from .serializers import (
    AdminOrderListSerializer,
    AdminOrderDetailSerializer,
    OrderStatusUpdateSerializer,
)
from .analytics_service import AnalyticsService

logger = logging.getLogger(__name__)


class AdminOrderListView(generics.ListAPIView):
    """
    GET /api/admin/orders/?status=&payment_type=&search=
    List all orders, newest first. search matches the site name.
    """
    serializer_class = AdminOrderListSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = Order.objects.all().select_related('user').prefetch_related('items')
        queryset = filter_orders(queryset, self.request.query_params)

        search = self.request.query_params.get('search', '').strip()
        if search:
            queryset = queryset.filter(site_name__icontains=search)

        return queryset.order_by('-created_at')


class AdminOrderDetailView(generics.RetrieveAPIView):
    """
    GET /api/admin/orders/{id}/
    Order detail with status history
    """
    serializer_class = AdminOrderDetailSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    lookup_url_kwarg = 'order_id'
    queryset = Order.objects.all().select_related('user').prefetch_related(
        'items',
        'status_history',
        'status_history__changed_by'
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def get_urgency_board(request):
    """
    GET /api/admin/orders/urgency/
    Open orders grouped by delivery urgency, most pressing first in each group
    """
    orders = Order.objects.filter(status__in=OPEN_STATUSES).select_related('user').prefetch_related(
        'items'
    ).order_by('delivery_window_end', 'created_at')

    groups = group_by_urgency(orders)

    return Response({
        tier: {
            'count': len(groups[tier]),
            'orders': AdminOrderListSerializer(groups[tier], many=True).data
        }
        for tier in TIER_ORDER
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def update_order_status(request, order_id):
    """
    POST /api/admin/orders/{id}/update-status/

    Body:
    {
      "status": "in_progress",
      "reason": "Supplier confirmed"
    }
    """
    order = get_object_or_404(Order, id=order_id)

    serializer = OrderStatusUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    new_status = serializer.validated_data['status']

    try:
        order = OrderService.transition_status(
            order,
            new_status,
            changed_by=request.user,
            reason=serializer.validated_data.get('reason', '')
        )
    except InvalidStatusTransition as e:
        return Response({
            'success': False,
            'message': str(e),
            'available_statuses': offered_transitions(e.current)
        }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'success': True,
        'message': f'Order status updated to {order.get_status_label()}',
        'order': AdminOrderDetailSerializer(order).data
    }, status=status.HTTP_200_OK)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def delete_order(request, order_id):
    """
    DELETE /api/admin/orders/{id}/delete/
    Permanently delete an order and its items
    """
    order = get_object_or_404(Order, id=order_id)
    reference = OrderService.delete_order(order, deleted_by=request.user)

    return Response({
        'success': True,
        'message': f'Order {reference} deleted'
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def download_order_pdf(request, order_id):
    """
    GET /api/admin/orders/{id}/pdf/
    """
    order = get_object_or_404(Order.objects.prefetch_related('items'), id=order_id)

    try:
        return order_pdf_response(order)
    except Exception:
        logger.exception(f"PDF generation failed for order {order.id}")
        return Response(
            {'error': 'Failed to generate order PDF'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def get_statistics(request):
    """
    GET /api/admin/statistics/
    Totals for the operator dashboard
    """
    return Response(AnalyticsService.get_dashboard_statistics(), status=status.HTTP_200_OK)
