from django.contrib.auth.models import AbstractUser
from django.db import models


ROLE_PERSONAL = 'personal'
ROLE_COMPANY = 'company'
ROLE_ADMIN = 'admin'

# Capability tags read by the permission layer
CUSTOMER_ROLES = (ROLE_PERSONAL, ROLE_COMPANY)
OPERATOR_ROLES = (ROLE_ADMIN,)


class CustomUser(AbstractUser):
    ROLE_CHOICES = [
        (ROLE_PERSONAL, 'Personal'),
        (ROLE_COMPANY, 'Company'),
        (ROLE_ADMIN, 'Admin'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_PERSONAL)
    firebase_uid = models.CharField(max_length=128, unique=True, blank=True, null=True)
    display_name = models.CharField(max_length=150, blank=True)

    # Company accounts
    company_name = models.CharField(max_length=150, blank=True)
    rfc = models.CharField(max_length=13, blank=True, help_text='Mexican tax id (RFC)')
    phone_number = models.CharField(max_length=15, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_operator(self):
        return self.role in OPERATOR_ROLES

    def get_display_name(self):
        """Name shown on orders and notifications"""
        return self.display_name or self.company_name or self.get_full_name() or self.email
