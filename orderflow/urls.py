"""
URL configuration for orderflow project.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from .health import health_check

urlpatterns = [
    # Health check endpoint (no authentication required)
    path('health/', health_check, name='health-check'),

    path('admin/', admin.site.urls),
    path('api/auth/', include('authentication.urls')),
    path('api/orders/', include('orders.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/admin/', include('admin_panel.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
