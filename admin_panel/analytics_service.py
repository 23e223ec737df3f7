from django.db.models import Sum, Count
from django.db.models.functions import TruncMonth

from authentication.models import CustomUser, CUSTOMER_ROLES
from orders.models import Order
from orders.status_machine import STATUS_CHOICES


class AnalyticsService:
    """Service for calculating dashboard metrics"""

    @staticmethod
    def get_status_counts(queryset=None):
        """
        Count orders by status. Every status is present, with 0 when unused.

        Returns:
            dict: status -> {'label', 'count'}
        """
        queryset = Order.objects.all() if queryset is None else queryset

        counts = {
            item['status']: item['count']
            for item in queryset.order_by().values('status').annotate(count=Count('id'))
        }

        return {
            status: {'label': label, 'count': counts.get(status, 0)}
            for status, label in STATUS_CHOICES
        }

    @staticmethod
    def get_monthly_totals(queryset=None):
        """
        Sum of order totals per calendar month of creation, oldest first.

        Returns:
            list: month (YYYY-MM), month_label, total, order_count
        """
        queryset = Order.objects.all() if queryset is None else queryset

        monthly_data = queryset.order_by().annotate(
            month=TruncMonth('created_at')
        ).values('month').annotate(
            total=Sum('total_amount'),
            order_count=Count('id')
        ).order_by('month')

        return [
            {
                'month': item['month'].strftime('%Y-%m'),
                'month_label': item['month'].strftime('%b %Y'),
                'total': float(item['total'] or 0),
                'order_count': item['order_count'],
            }
            for item in monthly_data
        ]

    @staticmethod
    def get_dashboard_statistics():
        """Totals shown on the operator dashboard"""
        return {
            'total_customers': CustomUser.objects.filter(role__in=CUSTOMER_ROLES).count(),
            'total_orders': Order.objects.count(),
            'total_amount': float(Order.objects.aggregate(total=Sum('total_amount'))['total'] or 0),
            'status_counts': AnalyticsService.get_status_counts(),
            'monthly_totals': AnalyticsService.get_monthly_totals(),
        }
