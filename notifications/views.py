from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .serializers import NotificationSerializer, MarkNotificationsReadSerializer
from .services import NotificationService


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def list_notifications(request):
    """
    GET /api/notifications/?unread_only=true
    Latest notifications for the current user with the unread count
    """
    unread_only = request.query_params.get('unread_only', 'false').lower() == 'true'
    notifications = NotificationService.get_user_notifications(request.user, unread_only=unread_only)

    return Response({
        'unread_count': NotificationService.get_unread_count(request.user),
        'notifications': NotificationSerializer(notifications, many=True).data
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id):
    """
    POST /api/notifications/{id}/mark-read/
    Mark a notification as read
    """
    notification = NotificationService.mark_as_read(notification_id, request.user)

    if notification:
        return Response({
            'success': True,
            'message': 'Notification marked as read'
        }, status=status.HTTP_200_OK)
    else:
        return Response({
            'success': False,
            'message': 'Notification not found'
        }, status=status.HTTP_404_NOT_FOUND)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_notifications_read(request):
    """
    POST /api/notifications/mark-read/
    Body: { "ids": [1, 2, 3] }
    """
    serializer = MarkNotificationsReadSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    count = NotificationService.mark_many_as_read(serializer.validated_data['ids'], request.user)

    return Response({
        'success': True,
        'message': f'{count} notifications marked as read',
        'count': count
    }, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_notifications_read(request):
    """
    POST /api/notifications/mark-all-read/
    Mark all notifications as read for the current user
    """
    count = NotificationService.mark_all_as_read(request.user)

    return Response({
        'success': True,
        'message': f'{count} notifications marked as read',
        'count': count
    }, status=status.HTTP_200_OK)
