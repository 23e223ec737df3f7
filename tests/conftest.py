from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from authentication.models import CustomUser, ROLE_ADMIN, ROLE_COMPANY, ROLE_PERSONAL
from orders.models import Order, OrderItem


@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.RATELIMIT_ENABLE = False
    settings.USE_CLOUDINARY = False
    settings.STORAGES = {
        **settings.STORAGES,
        'default': {'BACKEND': 'django.core.files.storage.InMemoryStorage'},
    }
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']


def _make_user(email, role, **extra):
    return CustomUser.objects.create_user(
        username=email, email=email, password='Str0ng!Pass', role=role, **extra
    )


@pytest.fixture
def customer(db):
    return _make_user('customer@example.com', ROLE_PERSONAL, display_name='Ana Customer')


@pytest.fixture
def other_customer(db):
    return _make_user('other@example.com', ROLE_COMPANY, company_name='Builders SA')


@pytest.fixture
def admin_user(db):
    return _make_user('admin@example.com', ROLE_ADMIN, display_name='Operator One')


@pytest.fixture
def second_admin(db):
    return _make_user('admin2@example.com', ROLE_ADMIN, display_name='Operator Two')


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer_client(customer):
    client = APIClient()
    client.force_authenticate(user=customer)
    return client


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def order_payload():
    today = timezone.localdate()
    return {
        'requester_name': 'Ana Customer',
        'site_name': 'Torre Norte',
        'street': 'Av. Reforma',
        'street_number': '120',
        'neighborhood': 'Centro',
        'postal_code': '06000',
        'city': 'Mexico City',
        'state': 'CDMX',
        'delivery_window_start': (today + timedelta(days=1)).isoformat(),
        'delivery_window_end': (today + timedelta(days=2)).isoformat(),
        'payment_type': 'cash',
        'items': [
            {'description': 'Portland Cement 50kg', 'quantity': 2, 'unit_price': '250'},
            {'description': 'Hydrated Lime 25kg', 'quantity': 1, 'unit_price': '80'},
        ],
    }


@pytest.fixture
def make_order(customer):
    """Create an order directly in the database"""
    def _make_order(user=None, status='pending', end_in_days=5, site_name='Torre Norte', payment_type='cash'):
        today = timezone.localdate()
        order = Order.objects.create(
            user=user or customer,
            requester_name='Ana Customer',
            site_name=site_name,
            street='Av. Reforma',
            street_number='120',
            neighborhood='Centro',
            postal_code='06000',
            city='Mexico City',
            state='CDMX',
            delivery_window_start=today + timedelta(days=min(end_in_days, 0)),
            delivery_window_end=today + timedelta(days=end_in_days),
            payment_type=payment_type,
            credit_frequency='monthly' if payment_type == 'credit' else '',
            total_amount=Decimal('580.00'),
            status=status,
        )
        OrderItem.objects.create(order=order, position=0, description='Portland Cement 50kg', quantity=2, unit_price=Decimal('250'))
        OrderItem.objects.create(order=order, position=1, description='Hydrated Lime 25kg', quantity=1, unit_price=Decimal('80'))
        return order
    return _make_order
