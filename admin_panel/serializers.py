from rest_framework import serializers
from authentication.models import CustomUser
from orders.serializers import OrderSerializer, OrderStatusHistorySerializer
from orders.status_machine import STATUS_CHOICES


class UserBasicSerializer(serializers.ModelSerializer):
    """Basic user information for admin views"""
    name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'name', 'role', 'company_name', 'phone_number']


class AdminOrderListSerializer(OrderSerializer):
    """Order with its customer, for the operator order list"""
    user = UserBasicSerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['user']
        read_only_fields = fields


class AdminOrderDetailSerializer(AdminOrderListSerializer):
    """Order detail including its status history"""
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)

    class Meta(AdminOrderListSerializer.Meta):
        fields = AdminOrderListSerializer.Meta.fields + ['status_history']
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    """Serializer for updating order status"""
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True)
