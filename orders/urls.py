from django.urls import path
from . import views

urlpatterns = [
    path('materials/', views.list_materials, name='material-list'),
    path('create/', views.create_order, name='create-order'),
    path('my-orders/', views.get_my_orders, name='my-orders'),
    path('summary/', views.get_order_summary, name='order-summary'),
    path('<uuid:order_id>/', views.get_order, name='get-order'),
    path('<uuid:order_id>/documents/', views.upload_documents, name='upload-documents'),
    path('<uuid:order_id>/pdf/', views.download_order_pdf, name='download-order-pdf'),
]
