"""
Management command to prune sessions and audit logs past retention.

Sessions older than SESSION_RETENTION_DAYS are deleted together with their
votes and payments; audit logs older than AUDIT_LOG_RETENTION_DAYS are
deleted on their own. Meant to run daily from cron.

Usage:
    python manage.py cleanup_play_data
    python manage.py cleanup_play_data --dry-run
"""

from django.conf import settings
from django.core.management.base import BaseCommand

from apps.play_sessions.services import cleanup_old_data, find_expired_data


class Command(BaseCommand):
    help = 'Delete sessions and audit logs older than their retention window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without making changes',
        )

    def handle(self, *args, **options):
        expired_sessions, expired_logs = find_expired_data()

        session_count = expired_sessions.count()
        log_count = expired_logs.count()

        if session_count == 0 and log_count == 0:
            self.stdout.write(
                self.style.SUCCESS('Nothing to clean up.')
            )
            return

        self.stdout.write(
            f'\nSessions older than {settings.SESSION_RETENTION_DAYS} days: {session_count}'
        )
        for session in expired_sessions:
            self.stdout.write(f'  - {session.play_date} | {session.status} | {session.total_cost}')
        self.stdout.write(
            f'Audit logs older than {settings.AUDIT_LOG_RETENTION_DAYS} days: {log_count}'
        )

        if options['dry_run']:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        result = cleanup_old_data()

        self.stdout.write(
            self.style.SUCCESS(
                f"\nDeleted {result['deleted_sessions']} session(s) "
                f"and {result['deleted_logs']} audit log(s)."
            )
        )
