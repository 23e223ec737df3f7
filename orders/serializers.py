from rest_framework import serializers
from .models import Order, OrderItem, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    subtotal = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = ['id', 'position', 'material_id', 'description', 'quantity', 'unit_price', 'subtotal']

    def get_subtotal(self, obj):
        """Return subtotal for this order item"""
        return float(obj.get_subtotal())


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    changed_by = serializers.EmailField(source='changed_by.email', read_only=True, default=None)

    class Meta:
        model = OrderStatusHistory
        fields = ['id', 'old_status', 'new_status', 'changed_by', 'changed_at', 'reason']


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    reference = serializers.CharField(source='get_reference', read_only=True)
    status_display = serializers.CharField(source='get_status_label', read_only=True)
    payment_terms = serializers.CharField(source='get_payment_terms_display', read_only=True)
    full_address = serializers.CharField(source='get_full_address', read_only=True)
    urgency = serializers.SerializerMethodField()
    available_statuses = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'reference', 'requester_name', 'site_name',
            'street', 'street_number', 'neighborhood', 'postal_code', 'city', 'state', 'full_address',
            'delivery_window_start', 'delivery_window_end',
            'payment_type', 'credit_frequency', 'payment_method', 'payment_terms',
            'total_amount', 'status', 'status_display', 'urgency', 'available_statuses',
            'identity_document_url', 'proof_of_address_url',
            'items', 'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_urgency(self, obj):
        """Urgency of the latest delivery date, computed at read time"""
        return obj.get_urgency().as_dict()

    def get_available_statuses(self, obj):
        return [
            {'value': value, 'label': label}
            for value, label in Order._meta.get_field('status').choices
            if value in obj.get_available_statuses()
        ]


class MaterialSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2)


class DocumentUploadSerializer(serializers.Serializer):
    identity_document = serializers.FileField(required=False)
    proof_of_address = serializers.FileField(required=False)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError('At least one document must be provided.')
        return data
