from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ['email', 'display_name', 'role', 'company_name', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'created_at']
    search_fields = ['email', 'display_name', 'company_name', 'rfc']

    fieldsets = UserAdmin.fieldsets + (
        ('Account', {'fields': ('role', 'display_name', 'firebase_uid')}),
        ('Company', {'fields': ('company_name', 'rfc', 'phone_number')}),
    )

    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Account', {'fields': ('email', 'role', 'display_name')}),
    )
