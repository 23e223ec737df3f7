from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Sum
from authentication.models import CustomUser
from decimal import Decimal
import uuid

from .status_machine import STATUS_CHOICES, PENDING, offered_transitions, get_status_label
from .urgency import classify_urgency


PAYMENT_CASH = 'cash'
PAYMENT_CREDIT = 'credit'

PAYMENT_TYPE_CHOICES = [
    (PAYMENT_CASH, 'Cash'),
    (PAYMENT_CREDIT, 'Credit'),
]

CREDIT_FREQUENCY_CHOICES = [
    ('weekly', 'Weekly'),
    ('biweekly', 'Biweekly'),
    ('monthly', 'Monthly'),
]


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(CustomUser, related_name='orders', on_delete=models.CASCADE)

    requester_name = models.CharField(max_length=150)
    site_name = models.CharField(max_length=200, help_text='Construction site the materials are for')

    # Delivery address
    street = models.CharField(max_length=200)
    street_number = models.CharField(max_length=20)
    neighborhood = models.CharField(max_length=150)
    postal_code = models.CharField(max_length=5)
    city = models.CharField(max_length=150)
    state = models.CharField(max_length=150)

    delivery_window_start = models.DateField()
    delivery_window_end = models.DateField()

    payment_type = models.CharField(max_length=10, choices=PAYMENT_TYPE_CHOICES)
    credit_frequency = models.CharField(max_length=10, choices=CREDIT_FREQUENCY_CHOICES, blank=True)
    payment_method = models.CharField(max_length=100, blank=True)

    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)

    # Blob store URLs for credit vetting documents
    identity_document_url = models.URLField(max_length=500, blank=True)
    proof_of_address_url = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='order_status_idx'),
            models.Index(fields=['payment_type'], name='order_payment_type_idx'),
            models.Index(fields=['delivery_window_end'], name='order_window_end_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(delivery_window_end__gte=F('delivery_window_start')),
                name='order_delivery_window_ordered',
            ),
        ]

    def __str__(self):
        return f"Order {self.get_reference()} - {self.site_name}"

    @property
    def is_cash_payment(self):
        return self.payment_type == PAYMENT_CASH

    @property
    def requires_documents(self):
        return self.payment_type == PAYMENT_CREDIT

    def get_reference(self):
        """Short human reference, TICKET-XXXXXXXX for cash orders, ORDER-XXXXXXXX otherwise"""
        prefix = 'TICKET' if self.is_cash_payment else 'ORDER'
        return f"{prefix}-{self.id.hex[:8].upper()}"

    def get_full_address(self):
        return (
            f"{self.street} {self.street_number}, {self.neighborhood}, "
            f"{self.city}, {self.state}, ZIP {self.postal_code}"
        )

    def get_payment_terms_display(self):
        terms = self.get_payment_type_display()
        if self.payment_type == PAYMENT_CREDIT and self.credit_frequency:
            terms = f"{terms} ({self.get_credit_frequency_display()})"
        return terms

    def get_status_label(self):
        return get_status_label(self.status)

    def get_urgency(self, today=None):
        return classify_urgency(self.delivery_window_end, today)

    def get_available_statuses(self):
        return offered_transitions(self.status)

    def calculate_total(self):
        """Sum of quantity x unit price over the stored items"""
        total = self.items.aggregate(total=Sum(F('quantity') * F('unit_price')))['total']
        return (total or Decimal('0')).quantize(Decimal('0.01'))


class OrderItem(models.Model):
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    position = models.PositiveIntegerField(default=0)
    material_id = models.CharField(max_length=50, blank=True)
    description = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        ordering = ['position', 'id']
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=1), name='order_item_quantity_positive'),
            models.CheckConstraint(condition=models.Q(unit_price__gte=0), name='order_item_unit_price_non_negative'),
        ]

    def __str__(self):
        return f"{self.description} x{self.quantity}"

    def get_subtotal(self):
        return self.unit_price * self.quantity


class OrderStatusHistory(models.Model):
    """Track all status changes for an order"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='status_history')
    old_status = models.CharField(max_length=20)
    new_status = models.CharField(max_length=20)
    changed_by = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True)
    changed_at = models.DateTimeField(auto_now_add=True)
    reason = models.TextField(blank=True, help_text='Reason for status change')

    class Meta:
        ordering = ['-changed_at']
        verbose_name_plural = 'Order status histories'

    def __str__(self):
        return f"{self.order.get_reference()}: {self.old_status} → {self.new_status}"
