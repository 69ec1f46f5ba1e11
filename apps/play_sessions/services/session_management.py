"""
Session lifecycle service.

Handles session creation, resource counts, completion and data retention.
"""

from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import QuerySet
from django.utils import timezone
import structlog

from apps.play_sessions.models import AuditLog, Session, SessionStatus

from .audit import record_audit
from .exceptions import SessionNotFoundError, SessionClosedError

logger = structlog.get_logger(__name__)


def get_session(*, session_id: UUID) -> Session:
    """
    Get a session by ID.

    Raises:
        SessionNotFoundError: If session doesn't exist
    """
    try:
        return Session.objects.get(id=session_id)
    except Session.DoesNotExist:
        raise SessionNotFoundError(session_id)


def lock_open_session(session_id: UUID) -> Session:
    """
    Lock a session row for the rest of the current transaction.

    Must be called inside ``transaction.atomic``.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
    """
    try:
        session = Session.objects.select_for_update().get(id=session_id)
    except Session.DoesNotExist:
        raise SessionNotFoundError(session_id)

    if not session.is_open:
        raise SessionClosedError(
            f"Session {session.play_date} is {session.status} and cannot be changed"
        )
    return session


def list_sessions(*, status: Optional[str] = None) -> QuerySet[Session]:
    """Return sessions newest first, optionally filtered by status."""
    queryset = Session.objects.all()
    if status:
        queryset = queryset.filter(status=status)
    return queryset


def get_or_create_session(*, play_date: Optional[date] = None) -> Session:
    """
    Return the session played on ``play_date`` (today by default).

    Concurrent first votes of the day race on the unique play_date; the
    loser of the race reads the winner's row.
    """
    play_date = play_date or timezone.localdate()

    session = Session.objects.filter(play_date=play_date).first()
    if session is not None:
        return session

    try:
        with transaction.atomic():
            session = Session.objects.create(play_date=play_date)
            record_audit(
                session=session,
                action='SESSION_CREATED',
                payload={'play_date': play_date.isoformat()},
            )
    except IntegrityError:
        return Session.objects.get(play_date=play_date)

    logger.info("session_created", session_id=str(session.id), play_date=play_date.isoformat())
    return session


@transaction.atomic
def update_session_counts(
    *,
    session_id: UUID,
    court_count: Optional[int] = None,
    shuttle_count: Optional[int] = None
) -> Session:
    """
    Update court and/or shuttlecock counts of a pending session.

    Counts are assumed validated by the caller. The session is not
    settled automatically; the cached total goes stale until the next
    settlement.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is no longer pending
    """
    session = lock_open_session(session_id)

    update_fields = ['updated_at']
    if court_count is not None:
        session.court_count = court_count
        update_fields.append('court_count')
    if shuttle_count is not None:
        session.shuttle_count = shuttle_count
        update_fields.append('shuttle_count')

    session.save(update_fields=update_fields)

    record_audit(
        session=session,
        action='COUNTS_UPDATED',
        payload={
            'court_count': session.court_count,
            'shuttle_count': session.shuttle_count,
        },
    )
    logger.info(
        "session_counts_updated",
        session_id=str(session.id),
        court_count=session.court_count,
        shuttle_count=session.shuttle_count,
    )
    return session


def _close_session(session_id: UUID, status: str, action: str) -> Session:
    session = lock_open_session(session_id)
    session.status = status
    session.save(update_fields=['status', 'updated_at'])

    record_audit(session=session, action=action, payload={})
    logger.info("session_closed", session_id=str(session.id), status=status)
    return session


@transaction.atomic
def complete_session(*, session_id: UUID) -> Session:
    """
    Close a session. Votes, counts and payment marks are frozen afterwards.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is already closed
    """
    return _close_session(session_id, SessionStatus.COMPLETED, 'SESSION_COMPLETED')


@transaction.atomic
def deactivate_session(*, session_id: UUID) -> Session:
    """
    Call off a pending session that will not be played. It is frozen
    the same way a completed session is.

    Raises:
        SessionNotFoundError: If session doesn't exist
        SessionClosedError: If session is already closed
    """
    return _close_session(session_id, SessionStatus.INACTIVE, 'SESSION_INACTIVATED')


def find_expired_data(*, now: Optional[datetime] = None) -> tuple[QuerySet, QuerySet]:
    """Sessions and audit logs past their retention window, as querysets."""
    now = now or timezone.now()
    session_cutoff = now.date() - timedelta(days=settings.SESSION_RETENTION_DAYS)
    log_cutoff = now - timedelta(days=settings.AUDIT_LOG_RETENTION_DAYS)

    return (
        Session.objects.filter(play_date__lt=session_cutoff),
        AuditLog.objects.filter(created_at__lt=log_cutoff),
    )


@transaction.atomic
def cleanup_old_data(*, now: Optional[datetime] = None) -> dict:
    """
    Delete sessions and audit logs past their retention window.

    Sessions older than SESSION_RETENTION_DAYS go with their votes, proxy
    votes and payments (cascade). Audit logs older than
    AUDIT_LOG_RETENTION_DAYS are pruned independently.

    Returns:
        dict with deleted_sessions and deleted_logs counts
    """
    expired_sessions, expired_logs = find_expired_data(now=now)

    deleted_sessions = expired_sessions.count()
    expired_sessions.delete()

    deleted_logs, _ = expired_logs.delete()

    result = {
        'deleted_sessions': deleted_sessions,
        'deleted_logs': deleted_logs,
    }
    record_audit(session=None, action='DATA_CLEANUP', payload=result)
    logger.info("data_cleanup_finished", **result)
    return result
