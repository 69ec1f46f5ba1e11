# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, Gender


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for participants.

    Lists registered bot users and proxy placeholders side by side so an
    organiser can fix a placeholder's gender before settling a session.
    """

    list_display = [
        'display_name',
        'external_id',
        'gender_badge',
        'is_real_badge',
        'is_staff',
        'created_at',
    ]

    list_filter = [
        'gender',
        'is_real',
        'is_active',
        'is_staff',
        'created_at',
    ]

    search_fields = [
        'display_name',
        'external_id',
    ]

    ordering = ['display_name']

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('external_id', 'display_name', 'gender', 'is_real', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('external_id', 'display_name', 'gender', 'password1', 'password2'),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser'),
        }),
    )

    readonly_fields = [
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def gender_badge(self, obj):
        """Display gender as colored badge."""
        bg = '#B85C8E' if obj.gender == Gender.FEMALE else '#5C7EB8'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, obj.get_gender_display()
        )
    gender_badge.short_description = 'Gender'
    gender_badge.admin_order_field = 'gender'

    def is_real_badge(self, obj):
        """Distinguish registered users from proxy placeholders."""
        if obj.is_real:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">{}</span>',
                'Registered'
            )
        return format_html(
            '<span style="background: #E5C49A; color: #2C1810; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            'Proxy'
        )
    is_real_badge.short_description = 'Kind'
    is_real_badge.admin_order_field = 'is_real'

    actions = [
        'mark_female',
        'mark_male',
    ]

    @admin.action(description='Set gender to female')
    def mark_female(self, request, queryset):
        count = queryset.update(gender=Gender.FEMALE)
        self.message_user(request, f'Updated {count} user(s).')

    @admin.action(description='Set gender to male')
    def mark_male(self, request, queryset):
        count = queryset.update(gender=Gender.MALE)
        self.message_user(request, f'Updated {count} user(s).')
