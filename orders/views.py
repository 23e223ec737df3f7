from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.response import Response
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django_ratelimit.decorators import ratelimit
import logging

from authentication.permissions import IsOrderOwnerOrAdmin
from .catalog import MATERIAL_CATALOG
from .models import Order, PAYMENT_TYPE_CHOICES
from .serializers import OrderSerializer, MaterialSerializer, DocumentUploadSerializer
from .services import OrderService
from .status_machine import ALL_STATUSES, is_terminal
from .validators import OrderValidationError, validate_document_file

logger = logging.getLogger(__name__)


def filter_orders(queryset, params):
    """Apply the optional status and payment_type query filters"""
    status_filter = params.get('status')
    if status_filter in ALL_STATUSES:
        queryset = queryset.filter(status=status_filter)

    payment_type = params.get('payment_type')
    if payment_type in dict(PAYMENT_TYPE_CHOICES):
        queryset = queryset.filter(payment_type=payment_type)

    return queryset


def get_visible_order(request, order_id):
    """
    Fetch an order the requesting user may see.
    Returns (order, None) or (None, error_response).
    """
    try:
        order = Order.objects.select_related('user').prefetch_related('items').get(id=order_id)
    except Order.DoesNotExist:
        return None, Response({'error': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)

    if not IsOrderOwnerOrAdmin().has_object_permission(request, None, order):
        return None, Response({'error': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)

    return order, None


def order_pdf_response(order):
    """Render the order summary PDF as a download"""
    from .pdf_generator import OrderPdfGenerator

    generator = OrderPdfGenerator()
    pdf_buffer = generator.generate_pdf(order)
    filename = generator.get_pdf_filename(order)

    response = HttpResponse(pdf_buffer.getvalue(), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_materials(request):
    """
    Material catalog offered on the order form.
    Endpoint: GET /api/orders/materials/
    """
    return Response(MaterialSerializer(MATERIAL_CATALOG, many=True).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([JSONParser, MultiPartParser, FormParser])
@ratelimit(key='user', rate='10/h', method='POST', block=True)
def create_order(request):
    """
    Create a materials order.
    Endpoint: POST /api/orders/create/
    Content-Type: application/json, or multipart/form-data for credit orders
    with identity_document and proof_of_address files (items as a JSON string)

    Rate Limit: 10 requests per hour per user
    """
    try:
        order, document_errors = OrderService.create_order(request.user, request.data, request.FILES)
    except OrderValidationError as e:
        return Response({
            'success': False,
            'error': 'Invalid order',
            'errors': e.as_list()
        }, status=status.HTTP_400_BAD_REQUEST)

    message = 'Order created successfully'
    if document_errors:
        message = 'Order created, but some documents could not be uploaded'

    return Response({
        'success': True,
        'message': message,
        'order': OrderSerializer(order).data,
        'document_errors': document_errors
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_my_orders(request):
    """
    Get all orders for current user, newest first.
    Endpoint: GET /api/orders/my-orders/?status=&payment_type=
    """
    orders = Order.objects.filter(user=request.user).prefetch_related('items')
    orders = filter_orders(orders, request.query_params).order_by('-created_at')
    serializer = OrderSerializer(orders, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_order(request, order_id):
    """
    Get order details.
    Endpoint: GET /api/orders/{id}/
    """
    order, error_response = get_visible_order(request, order_id)
    if error_response:
        return error_response

    return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
@ratelimit(key='user', rate='20/h', method='POST', block=True)
def upload_documents(request, order_id):
    """
    Upload supporting documents for a credit order.
    Endpoint: POST /api/orders/{id}/documents/
    Content-Type: multipart/form-data
    Body: { "identity_document": file, "proof_of_address": file }
    """
    try:
        order = Order.objects.get(id=order_id, user=request.user)
    except Order.DoesNotExist:
        return Response({'error': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)

    if not order.requires_documents:
        return Response(
            {'error': 'Documents are only required for credit orders'},
            status=status.HTTP_400_BAD_REQUEST
        )

    if is_terminal(order.status):
        return Response(
            {'error': f'Cannot upload documents for order with status: {order.status}'},
            status=status.HTTP_400_BAD_REQUEST
        )

    serializer = DocumentUploadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    errors = []
    for field_name, upload in serializer.validated_data.items():
        try:
            validate_document_file(upload)
        except ValidationError as e:
            errors.append({'field': field_name, 'code': e.code, 'message': e.messages[0]})

    if errors:
        return Response({'success': False, 'errors': errors}, status=status.HTTP_400_BAD_REQUEST)

    failed = OrderService.attach_documents(order, serializer.validated_data)
    if failed:
        return Response({
            'success': False,
            'error': 'Document upload failed',
            'errors': failed
        }, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'success': True,
        'message': 'Documents uploaded successfully',
        'order': OrderSerializer(order).data
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def download_order_pdf(request, order_id):
    """
    Download the order summary PDF.
    Endpoint: GET /api/orders/{id}/pdf/

    Accessible by the order owner and admin users
    """
    order, error_response = get_visible_order(request, order_id)
    if error_response:
        return error_response

    try:
        return order_pdf_response(order)
    except Exception:
        logger.exception(f"PDF generation failed for order {order.id}")
        return Response(
            {'error': 'Failed to generate order PDF'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_order_summary(request):
    """
    Dashboard data for the current user.
    Endpoint: GET /api/orders/summary/
    """
    from admin_panel.analytics_service import AnalyticsService

    orders = Order.objects.filter(user=request.user)
    recent = orders.prefetch_related('items').order_by('-created_at')[:5]

    return Response({
        'total_orders': orders.count(),
        'status_counts': AnalyticsService.get_status_counts(orders),
        'monthly_totals': AnalyticsService.get_monthly_totals(orders),
        'recent_orders': OrderSerializer(recent, many=True).data
    }, status=status.HTTP_200_OK)
