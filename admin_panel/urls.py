from django.urls import path
from .views import (
    AdminOrderListView,
    AdminOrderDetailView,
    get_urgency_board,
    update_order_status,
    delete_order,
    download_order_pdf,
    get_statistics,
)

urlpatterns = [
    # Order management endpoints
    path('orders/', AdminOrderListView.as_view(), name='admin-order-list'),
    path('orders/urgency/', get_urgency_board, name='admin-order-urgency'),
    path('orders/<uuid:order_id>/', AdminOrderDetailView.as_view(), name='admin-order-detail'),
    path('orders/<uuid:order_id>/update-status/', update_order_status, name='admin-update-order-status'),
    path('orders/<uuid:order_id>/delete/', delete_order, name='admin-delete-order'),
    path('orders/<uuid:order_id>/pdf/', download_order_pdf, name='admin-download-order-pdf'),

    # Dashboard
    path('statistics/', get_statistics, name='admin-statistics'),
]
