from django.urls import path
from . import views

urlpatterns = [
    path('', views.list_notifications, name='notification-list'),
    path('mark-read/', views.mark_notifications_read, name='notification-mark-many-read'),
    path('mark-all-read/', views.mark_all_notifications_read, name='notification-mark-all-read'),
    path('<int:notification_id>/mark-read/', views.mark_notification_read, name='notification-mark-read'),
]
