from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for notifications"""
    order_reference = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            'id', 'notification_type', 'title', 'message', 'order', 'order_label',
            'order_reference', 'status', 'is_read', 'created_at'
        ]
        read_only_fields = fields

    def get_order_reference(self, obj):
        """Return the order reference if the order still exists"""
        return obj.order.get_reference() if obj.order else None


class MarkNotificationsReadSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)
