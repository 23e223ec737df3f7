from django.db import models
from authentication.models import CustomUser
from orders.models import Order


NOTIFICATION_NEW_ORDER = 'new_order'
NOTIFICATION_STATUS_CHANGED = 'status_changed'


class Notification(models.Model):
    NOTIFICATION_TYPES = [
        (NOTIFICATION_NEW_ORDER, 'New Order'),
        (NOTIFICATION_STATUS_CHANGED, 'Status Changed'),
    ]

    user = models.ForeignKey(CustomUser, related_name='notifications', on_delete=models.CASCADE)
    notification_type = models.CharField(max_length=20, choices=NOTIFICATION_TYPES)
    title = models.CharField(max_length=200)
    message = models.TextField()
    # Kept when the order is deleted; order_label still names it
    order = models.ForeignKey(Order, related_name='notifications', on_delete=models.SET_NULL, null=True, blank=True)
    order_label = models.CharField(max_length=200, blank=True)
    # Order status the notification refers to
    status = models.CharField(max_length=20, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.notification_type} - {self.user.email}"
