"""
DRF exception handler that turns rate limit hits into 429 responses
"""
from django_ratelimit.exceptions import Ratelimited
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    # Ratelimited subclasses PermissionDenied, which DRF would render as 403
    if isinstance(exc, Ratelimited):
        return Response(
            {'error': 'Too many requests. Please try again later.', 'detail': 'Rate limit exceeded'},
            status=status.HTTP_429_TOO_MANY_REQUESTS
        )
    return exception_handler(exc, context)
