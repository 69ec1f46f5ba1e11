# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin, messages
from django.utils.html import format_html
from apps.payments.models import Payment
from apps.payments.services import (
    mark_payment_paid,
    PaymentAlreadyPaidError,
    SessionClosedError,
)


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Admin interface for ledger rows."""

    list_display = [
        'user_name',
        'session',
        'amount',
        'paid_badge',
        'paid_at',
    ]
    list_filter = ['paid', 'session__play_date']
    search_fields = ['user_name', 'user__external_id']
    readonly_fields = ['session', 'user', 'user_name', 'amount', 'created_at', 'updated_at']
    date_hierarchy = 'created_at'

    def paid_badge(self, obj):
        """Display paid state as colored badge."""
        if obj.paid:
            bg, fg, label = '#6B8E5E', 'white', 'Paid'
        else:
            bg, fg, label = '#E5C49A', '#2C1810', 'Unpaid'
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, label
        )
    paid_badge.short_description = 'Status'
    paid_badge.admin_order_field = 'paid'

    actions = ['mark_as_paid']

    @admin.action(description='Mark selected payments as paid')
    def mark_as_paid(self, request, queryset):
        marked, skipped = 0, 0
        for payment_id in queryset.values_list('id', flat=True):
            try:
                mark_payment_paid(payment_id=payment_id)
            except (PaymentAlreadyPaidError, SessionClosedError):
                skipped += 1
            else:
                marked += 1

        self.message_user(request, f"Marked {marked} payment(s) as paid")
        if skipped:
            self.message_user(
                request,
                f"Skipped {skipped} payment(s) already paid or in closed sessions",
                level=messages.WARNING,
            )
