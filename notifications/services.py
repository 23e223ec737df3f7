from django.conf import settings

from authentication.models import CustomUser, OPERATOR_ROLES
from orders.status_machine import PENDING, get_status_label
from .models import Notification, NOTIFICATION_NEW_ORDER, NOTIFICATION_STATUS_CHANGED


class NotificationService:
    """Service for creating and managing notifications"""

    @staticmethod
    def notify_admins_new_order(order):
        """
        Send one notification to every admin account when an order is created.
        """
        admin_users = CustomUser.objects.filter(role__in=OPERATOR_ROLES, is_active=True)
        requester = order.requester_name or order.user.get_display_name()

        notifications = []
        for admin in admin_users:
            notification = Notification(
                user=admin,
                notification_type=NOTIFICATION_NEW_ORDER,
                title='New Order',
                message=f'New order from "{requester}" for the site "{order.site_name}".',
                order=order,
                order_label=order.site_name,
                status=PENDING,
            )
            notifications.append(notification)

        # Bulk create for efficiency
        Notification.objects.bulk_create(notifications)

        return len(notifications)

    @staticmethod
    def notify_owner_status_changed(order, new_status):
        """
        Notify the order owner that their order moved to a new status.
        """
        label = get_status_label(new_status)
        return Notification.objects.create(
            user=order.user,
            notification_type=NOTIFICATION_STATUS_CHANGED,
            title='Order Status Updated',
            message=f'The status of your order for the site "{order.site_name}" has changed to: {label}.',
            order=order,
            order_label=order.site_name,
            status=new_status,
        )

    @staticmethod
    def get_user_notifications(user, unread_only=False):
        """
        Most recent notifications for a user.
        """
        queryset = Notification.objects.filter(user=user)

        if unread_only:
            queryset = queryset.filter(is_read=False)

        return queryset.order_by('-created_at', '-id')[:settings.NOTIFICATION_LIST_LIMIT]

    @staticmethod
    def get_unread_count(user):
        return Notification.objects.filter(user=user, is_read=False).count()

    @staticmethod
    def mark_as_read(notification_id, user):
        """
        Mark a notification as read.
        """
        try:
            notification = Notification.objects.get(id=notification_id, user=user)
            notification.is_read = True
            notification.save(update_fields=['is_read'])
            return notification
        except Notification.DoesNotExist:
            return None

    @staticmethod
    def mark_many_as_read(notification_ids, user):
        """
        Mark the given notifications as read. Ids owned by other users are ignored.
        """
        if not notification_ids:
            return 0
        return Notification.objects.filter(
            id__in=notification_ids, user=user, is_read=False
        ).update(is_read=True)

    @staticmethod
    def mark_all_as_read(user):
        """
        Mark all notifications as read for a user.
        """
        count = Notification.objects.filter(user=user, is_read=False).update(is_read=True)
        return count
