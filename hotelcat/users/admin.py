from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ['email']
    list_display = ['email', 'role', 'hotel', 'is_active', 'created_at']
    list_filter = ['role', 'is_active', 'hotel']
    search_fields = ['email']
    raw_id_fields = ['hotel']
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Catalog access', {'fields': ('role', 'hotel')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'role', 'hotel'),
        }),
    )
