from django.contrib import admin
from .models import Order, OrderItem, OrderStatusHistory


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ['old_status', 'new_status', 'changed_by', 'changed_at', 'reason']
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'site_name', 'user', 'payment_type', 'total_amount', 'status', 'delivery_window_end', 'created_at']
    list_filter = ['status', 'payment_type', 'created_at']
    search_fields = ['site_name', 'requester_name', 'user__email']
    inlines = [OrderItemInline, OrderStatusHistoryInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(OrderStatusHistory)
class OrderStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ['order', 'old_status', 'new_status', 'changed_by', 'changed_at']
    list_filter = ['new_status', 'changed_at']
    readonly_fields = ['changed_at']
