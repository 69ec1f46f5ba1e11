# ==========================================
# apps/play_sessions/admin.py
# ==========================================

from django.contrib import admin, messages
from django.utils.html import format_html
from apps.play_sessions.models import Session, SessionStatus, Vote, ProxyVote, AuditLog
from apps.play_sessions.services import (
    complete_session,
    deactivate_session,
    SessionClosedError,
)


class VoteInline(admin.TabularInline):
    """Inline admin for direct votes."""
    model = Vote
    extra = 0
    fields = ['user', 'vote_type', 'created_at']
    readonly_fields = ['created_at']
    autocomplete_fields = ['user']


class ProxyVoteInline(admin.TabularInline):
    """Inline admin for proxy votes."""
    model = ProxyVote
    fk_name = 'session'
    extra = 0
    fields = ['voter', 'target', 'vote_type', 'created_at']
    readonly_fields = ['created_at']
    autocomplete_fields = ['voter', 'target']


STATUS_COLORS = {
    SessionStatus.PENDING: ('#E5C49A', '#2C1810'),
    SessionStatus.COMPLETED: ('#6B8E5E', 'white'),
    SessionStatus.INACTIVE: ('#8B8B8B', 'white'),
}


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    """Admin interface for play sessions."""

    list_display = [
        'play_date',
        'status_badge',
        'court_count',
        'shuttle_count',
        'total_cost',
        'computed',
        'going_count',
    ]
    list_filter = ['status', 'computed', 'play_date']
    readonly_fields = ['total_cost', 'computed', 'created_at', 'updated_at']
    inlines = [VoteInline, ProxyVoteInline]
    date_hierarchy = 'play_date'
    ordering = ['-play_date']

    fieldsets = (
        ('Session', {
            'fields': ('play_date', 'status')
        }),
        ('Resources', {
            'fields': ('court_count', 'shuttle_count')
        }),
        ('Settlement', {
            'fields': ('total_cost', 'computed')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def status_badge(self, obj):
        """Display status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#8B8B8B', 'white'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    def going_count(self, obj):
        """Going votes plus going proxy votes."""
        return (
            obj.votes.filter(vote_type='going').count()
            + obj.proxy_votes.filter(vote_type='going').count()
        )
    going_count.short_description = 'Going'

    actions = ['mark_completed', 'mark_inactive']

    def _close_selected(self, request, queryset, close, verb):
        closed, skipped = 0, 0
        for session_id in queryset.values_list('id', flat=True):
            try:
                close(session_id=session_id)
            except SessionClosedError:
                skipped += 1
            else:
                closed += 1

        self.message_user(request, f"{verb} {closed} session(s)")
        if skipped:
            self.message_user(
                request,
                f"Skipped {skipped} session(s) that were not pending",
                level=messages.WARNING,
            )

    @admin.action(description='Mark selected sessions as completed')
    def mark_completed(self, request, queryset):
        self._close_selected(request, queryset, complete_session, 'Completed')

    @admin.action(description='Mark selected sessions as inactive')
    def mark_inactive(self, request, queryset):
        self._close_selected(request, queryset, deactivate_session, 'Deactivated')


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only view of the audit trail."""

    list_display = ['created_at', 'action', 'session']
    list_filter = ['action', 'created_at']
    search_fields = ['action']
    readonly_fields = ['session', 'action', 'payload', 'created_at']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
