"""
Health check endpoint for monitoring system status
"""

from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
import logging
import time

logger = logging.getLogger(__name__)

start_time = time.time()

MEMORY_WARNING_MB = 400


@csrf_exempt
@require_http_methods(["GET", "HEAD"])
def health_check(request):
    """
    Health check endpoint for monitoring system status.

    Returns:
        - 200 OK: System is healthy (database connected)
        - 503 Service Unavailable: System is unhealthy (database disconnected)

    Response format:
        {
            "status": "healthy" | "unhealthy",
            "service": "orderflow-api",
            "database": "connected" | "disconnected",
            "memory_mb": 150.25,
            "memory_warning": false,
            "uptime_seconds": 3600,
            "timestamp": "2025-11-03T14:23:45Z"
        }
    """
    import psutil

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except Exception as e:
        logger.error(f"Health check failed - database error: {e}", exc_info=True)
        return JsonResponse({
            'status': 'unhealthy',
            'service': 'orderflow-api',
            'database': 'disconnected',
            'error': str(e),
            'timestamp': timezone.now().isoformat()
        }, status=503)

    memory_mb = psutil.Process().memory_info().rss / 1024 / 1024
    memory_warning = memory_mb > MEMORY_WARNING_MB

    if memory_warning:
        logger.warning(f"Health check - memory warning: {memory_mb:.2f}MB exceeds {MEMORY_WARNING_MB}MB threshold")

    return JsonResponse({
        'status': 'healthy',
        'service': 'orderflow-api',
        'database': 'connected',
        'memory_mb': round(memory_mb, 2),
        'memory_warning': memory_warning,
        'uptime_seconds': int(time.time() - start_time),
        'timestamp': timezone.now().isoformat()
    }, status=200)
